from __future__ import annotations

import logging
from typing import Any, Dict, Iterable, Mapping
from urllib.parse import urlencode

import httpx

from src.relay.errors import ForwardError

logger = logging.getLogger(__name__)


def build_forward_url(base_url: str, params: Mapping[str, str]) -> str:
    """Append the config's query params to the base URL (keys sorted)."""
    return f"{base_url}?{urlencode(sorted(params.items()))}"


# PUBLIC_INTERFACE
async def forward_group(client: httpx.AsyncClient, base_url: str, params: Mapping[str, str], group: Dict[str, Any]) -> None:
    """
    POST one alert group as JSON to base_url with params as the query string.

    Only transport-level failures raise (as ForwardError); the downstream status
    code and body are logged but not acted upon.
    """
    url = build_forward_url(base_url, params)
    logger.debug("Forwarding body: %s", group)
    logger.info("Forwarding %s alert group to %s", group.get("status"), url)
    try:
        resp = await client.post(url, json=group)
    except (httpx.HTTPError, httpx.InvalidURL) as e:
        raise ForwardError(f"forward to {url} failed: {e}", url) from e

    if resp.is_error:
        logger.warning("Downstream %s answered %s for %s group", url, resp.status_code, group.get("status"))


# PUBLIC_INTERFACE
async def forward_groups(
    client: httpx.AsyncClient,
    base_url: str,
    params: Mapping[str, str],
    groups: Iterable[Dict[str, Any]],
) -> int:
    """
    Forward groups one after another, stopping at the first ForwardError.

    Not transactional: groups sent before a failure are not rolled back.
    Returns the number of groups forwarded.
    """
    sent = 0
    for group in groups:
        await forward_group(client, base_url, params, group)
        sent += 1
    return sent
