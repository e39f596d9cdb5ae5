"""JSON over HTTP with provider error mapping.

Transport failures (connection refused, DNS, timeouts) become
``ProviderUnavailableError``. Non-OK statuses and undecodable bodies
become ``ProviderResponseError`` carrying the status code.
"""

from __future__ import annotations

import logging
from typing import Any, Optional

import requests

from ..domain.errors import ProviderResponseError, ProviderUnavailableError

logger = logging.getLogger(__name__)


def request_json(
    session: requests.Session,
    method: str,
    url: str,
    *,
    provider: str,
    query: str = "",
    timeout: Optional[float] = None,
    **kwargs: Any,
) -> Any:
    """Send a request and decode its JSON body.

    Args:
        session: Session to send the request with.
        method: HTTP method.
        url: Request URL.
        provider: Provider name for errors and logs.
        query: Query being served, for errors and logs.
        timeout: Request timeout in seconds.
        **kwargs: Passed through to ``Session.request``.

    Returns:
        The decoded JSON body.

    Raises:
        ProviderUnavailableError: The provider could not be reached.
        ProviderResponseError: Non-OK status or malformed JSON.
    """
    try:
        response = session.request(method, url, timeout=timeout, **kwargs)
    except requests.RequestException as e:
        logger.warning(
            "Provider unreachable",
            extra={"provider": provider, "query": query, "error": str(e)},
        )
        raise ProviderUnavailableError(
            f"{provider} request failed",
            cause=e,
            provider=provider,
            query=query,
        )

    if not response.ok:
        logger.warning(
            "Provider returned error status",
            extra={
                "provider": provider,
                "query": query,
                "status_code": response.status_code,
                "body": response.text[:500],
            },
        )
        raise ProviderResponseError(
            f"{provider} returned HTTP {response.status_code}",
            provider=provider,
            query=query,
            status_code=response.status_code,
        )

    try:
        return response.json()
    except ValueError as e:
        raise ProviderResponseError(
            f"{provider} returned malformed JSON",
            cause=e,
            provider=provider,
            query=query,
            status_code=response.status_code,
        )
