# src/periscope/probe.py
"""One-shot check that a running Periscope serves a known file."""

import logging
from dataclasses import dataclass
from typing import Optional

import httpx

from periscope.config import DEFAULT_HOST, DEFAULT_PORT, DEFAULT_PROBE_NEEDLE, DEFAULT_ROUTE

logger = logging.getLogger(__name__)

DEFAULT_URL = f"http://{DEFAULT_HOST}:{DEFAULT_PORT}{DEFAULT_ROUTE}"
SNIPPET_LENGTH = 200


class ProbeError(Exception):
    pass


@dataclass(frozen=True)
class ProbeResult:
    status_code: int
    body_length: int
    found: bool
    snippet: str
    needle: str


def probe(
    url: str = DEFAULT_URL,
    needle: str = DEFAULT_PROBE_NEEDLE,
    timeout: float = 10.0,
    client: Optional[httpx.Client] = None,
) -> ProbeResult:
    """GETs url once, buffers the body and checks it contains needle."""
    owns_client = client is None
    client = client or httpx.Client(timeout=timeout)
    try:
        response = client.get(url)
    except httpx.RequestError as e:
        raise ProbeError(f"Problem with request: {e}") from e
    finally:
        if owns_client:
            client.close()

    body = response.text
    logger.debug("Probe %s -> %d (%d chars)", url, response.status_code, len(body))
    return ProbeResult(
        status_code=response.status_code,
        body_length=len(body),
        found=needle in body,
        snippet=body[:SNIPPET_LENGTH],
        needle=needle,
    )


def format_report(result: ProbeResult) -> str:
    lines = [
        f"STATUS: {result.status_code}",
        f"BODY LENGTH: {result.body_length}",
    ]
    if result.found:
        lines.append(f"SUCCESS: {result.needle} found in response.")
    else:
        lines.append(f"FAILURE: {result.needle} NOT found in response.")
        lines.append(f"Snippet: {result.snippet}")
    return "\n".join(lines)
