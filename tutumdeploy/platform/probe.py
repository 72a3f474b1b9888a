"""Best-effort HTTP probe of a freshly deployed endpoint."""

import logging

import httpx

logger = logging.getLogger(__name__)


def endpoint_url(params, domain):
    """Public URL the load balancer serves the target on."""
    if params.is_production:
        return f"http://{domain}/"
    return f"http://{params.branch}.{params.environment}.{domain}/"


async def probe_endpoint(url, timeout=10.0, dry_run=False):
    """Issue a single GET against url and log the outcome.

    Returns the HTTP status code, or None when the request could not be made.
    Never raises: the stack is already deployed at this point.
    """
    if dry_run:
        logger.info(f"[dry-run] GET {url}")
        return None

    try:
        async with httpx.AsyncClient(follow_redirects=True) as client:
            resp = await client.get(url, timeout=timeout)
    except httpx.HTTPError as e:
        logger.warning(f"Endpoint {url} not reachable yet: {e}")
        return None

    if resp.is_success:
        logger.info(f"Endpoint {url} responded {resp.status_code}.")
    else:
        logger.warning(f"Endpoint {url} responded {resp.status_code}.")
    return resp.status_code
