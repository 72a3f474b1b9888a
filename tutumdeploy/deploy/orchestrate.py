"""Deploy orchestration: shared stack, target stack, load balancer rewiring."""

import logging
import os

from tutumdeploy.config import DeployConfig
from tutumdeploy.deploy.links import LINKS_VARIABLE, compute_links, discover_links, format_links
from tutumdeploy.deploy.params import DeployParams
from tutumdeploy.deploy.stack import deploy_stack, validate_locked_tags
from tutumdeploy.deploy.template import render_stackfile
from tutumdeploy.deploy.variables import build_variable_store
from tutumdeploy.platform.probe import endpoint_url, probe_endpoint
from tutumdeploy.platform.shell import make_run_cmd, make_write_file
from tutumdeploy.platform.tutum import TutumClient, flush_dns_cache

logger = logging.getLogger(__name__)

PRODUCTION_CHECKLIST = """
Checklist:
- Have you updated the 'production' tag of every service image and pushed it?
- Have you updated the 'production' tag of every locked image and pushed it?
"""


async def run_deploy(run_cmd, write_file, params: DeployParams, config: DeployConfig, store=None):
    """Shared deploy orchestration.

    Args:
        run_cmd: async callable(command_list, timeout=600, log_output=False, quiet=False) -> (returncode, stdout, stderr)
        write_file: async callable(path, content) -> None
        params: resolved deploy target
        config: project configuration
        store: variable store; built from params and the environment when omitted

    Raises DeployError subclasses on any fatal failure; nothing is rolled back.
    """
    client = TutumClient(run_cmd, tutum_bin=config.tutum_bin)
    if store is None:
        store = build_variable_store(params, lenient=not config.strict)

    if params.is_production:
        logger.info(f"~ Doing PRODUCTION deploy of {params.service} to {params.stack_name}.")
        logger.info(PRODUCTION_CHECKLIST)
    else:
        logger.info(f"~ Deploying {params.branch} to {params.environment} as {params.stack_name}/{params.service}.")

    has_solo = os.path.isfile(params.solo_template)

    # Step 1: Shared stack, keeping whatever the load balancer links to today
    if has_solo:
        logger.info(f"\nDeploying shared stack {params.solo_stack}...")
        existing = await discover_links(client, params.lb_service, params.service_prefix)
        store.bind(LINKS_VARIABLE, format_links(existing))
        await deploy_stack(client, params.solo_stack, params.solo_file, params.solo_template, store, write_file)
    else:
        logger.info(f"No {params.solo_template} found; skipping shared stack and load balancer rewiring.")

    # Step 2: Target stack
    logger.info(f"\nDeploying stack {params.stack_name}...")
    await render_stackfile(params.stack_template, params.stack_file, store, write_file)
    await validate_locked_tags(client, store, config.locked_images)
    await deploy_stack(client, params.stack_name, params.stack_file)

    # Step 3: Point the load balancer at the new service
    if has_solo:
        logger.info(f"\nLinking {params.lb_service} to {params.service}.{params.stack_name}...")
        links = await compute_links(client, store, params)
        store.bind(LINKS_VARIABLE, format_links(links))
        await deploy_stack(client, params.solo_stack, params.solo_file, params.solo_template, store, write_file)
        await client.redeploy_service(params.lb_service)

    # Step 4: New hostnames must not hit a stale negative DNS cache entry
    await flush_dns_cache(run_cmd, config.dns_flush_command)

    url = endpoint_url(params, config.domain)
    if config.probe:
        await probe_endpoint(url, timeout=config.probe_timeout, dry_run=params.dry_run)

    status = "dry-run (not deployed)" if params.dry_run else "deployed"
    logger.info(f"\nEndpoint: {url}")
    logger.info(f"Stack: {params.stack_name}")
    logger.info(f"Status: {status}")
    return True


async def deploy(params: DeployParams, config: DeployConfig) -> bool:
    """Deploy a target from this machine. Single entry point."""
    run_cmd = make_run_cmd(dry_run=params.dry_run)
    write_file = make_write_file(dry_run=params.dry_run)
    return await run_deploy(run_cmd, write_file, params, config)
