"""Load balancer linker: work out which services the shared load balancer links to."""

import json
import logging

from tutumdeploy.deploy.params import strip_prefix
from tutumdeploy.errors import DeployError

logger = logging.getLogger(__name__)

LINKS_VARIABLE = "LB_LINKS"


def make_link(service_name, stack_name, service_prefix):
    """Build ``service.stack:label-stack``, label being the service name without its prefix."""
    label = strip_prefix(service_name, service_prefix)
    return f"{service_name}.{stack_name}:{label}-{stack_name}"


def parse_public_dns(public_dns):
    """Split ``<service>.<stack>.<user>.svc.tutum.io`` into (service, stack)."""
    parts = public_dns.split(".")
    if len(parts) < 2 or not parts[0] or not parts[1]:
        raise ValueError(f"Unexpected public DNS name: {public_dns!r}")
    return parts[0], parts[1]


def merge_links(*groups):
    """Concatenate link lists, dropping duplicates but keeping first-seen order."""
    return list(dict.fromkeys(link for group in groups for link in group))


def format_links(links):
    """Render a link list as a YAML flow sequence for the LB_LINKS placeholder."""
    return json.dumps(links)


async def discover_links(client, lb_service, service_prefix):
    """Links the load balancer currently has, rebuilt from each linked service's public DNS.

    Best effort: any failure yields an empty list.
    """
    try:
        lb = await client.inspect_service(lb_service)
        if lb is None:  # dry-run
            return []
        links = []
        for linked in lb.get("linked_to_service", []):
            service = await client.inspect_service(linked["to_service"])
            service_name, stack_name = parse_public_dns(service["public_dns"])
            links.append(make_link(service_name, stack_name, service_prefix))
    except (DeployError, ValueError, KeyError, TypeError, AttributeError) as e:
        logger.warning(f"Could not read links of {lb_service} ({e}); starting from an empty link set.")
        return []

    logger.info(f"{lb_service} currently links to {len(links)} service(s).")
    return links


def derive_links(store, params):
    """Links to the companion service of every LOCKED_<NAME>_TAG in the store."""
    links = []
    for name in store.locked_tags():
        companion = params.service_prefix + name.lower().replace("_", "-")
        links.append(make_link(companion, params.stack_name, params.service_prefix))
    return links


async def compute_links(client, store, params):
    """Existing load balancer links plus derived links plus the deployed service itself."""
    existing = await discover_links(client, params.lb_service, params.service_prefix)
    own = make_link(params.service, params.stack_name, params.service_prefix)
    return merge_links(existing, derive_links(store, params), [own])
