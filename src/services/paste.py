"""Client for the paste service used to offload long command output."""
from __future__ import annotations

from typing import Optional
import logging

import aiohttp

logger = logging.getLogger(__name__)

DEFAULT_PASTE_URL = "https://pastecord.com"


async def Pastecord(data: str, base_url: str = DEFAULT_PASTE_URL, *, session: Optional[aiohttp.ClientSession] = None) -> str:
    """Upload `data` as a raw document and return its public URL.

    Args:
        data: Text to upload.
        base_url: Service root; documents are POSTed to `{base_url}/documents`.
        session: Existing aiohttp session to reuse; a short-lived one is
            created when omitted.

    Returns:
        str: `{base_url}/{key}` for the created document.

    Raises:
        aiohttp.ClientError: On transport errors or a non-2xx response.
        ValueError: If the response carries no document key.
    """
    base = base_url.rstrip("/")
    if session is None:
        async with aiohttp.ClientSession() as own_session:
            return await _Upload(own_session, base, data)
    return await _Upload(session, base, data)


async def _Upload(session: aiohttp.ClientSession, base: str, data: str) -> str:
    async with session.post(f"{base}/documents", data=data.encode("utf-8")) as response:
        response.raise_for_status()
        payload = await response.json(content_type=None)
    key = payload.get("key") if isinstance(payload, dict) else None
    if not key:
        raise ValueError(f"Paste service returned no document key: {payload!r}")
    logger.debug("Uploaded %d characters to %s/%s", len(data), base, key)
    return f"{base}/{key}"
