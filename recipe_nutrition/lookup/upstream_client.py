"""Single-attempt HTTP client for upstream nutrition providers.

Every public method issues exactly one request. A response that arrives is
returned as an :class:`UpstreamResponse` whatever its status; only a missing
response (timeout, connection failure) raises.
"""

import logging
from dataclasses import dataclass
from typing import Any, Dict, List, Mapping, Optional, Tuple
from urllib.parse import urlencode

import requests

from recipe_nutrition.lookup.errors import UpstreamUnreachableError

logger = logging.getLogger(__name__)


@dataclass
class UpstreamResponse:
    """Raw response from an upstream provider.

    Attributes:
        status_code: HTTP status code
        body: Decoded JSON body, or text when not JSON, or the reason phrase
            when the body is empty
        reason: HTTP reason phrase
    """

    status_code: int
    body: Any
    reason: str = ""

    @property
    def ok(self) -> bool:
        return 200 <= self.status_code < 300


class UpstreamClient:
    """HTTP client for the search and ingredient-parsing providers.

    Usage:
        client = UpstreamClient()
        response = client.get("https://api.edamam.com/...", params={"ingr": "1 egg"}, timeout=10)
        if response.ok:
            print(response.body)
    """

    def __init__(self, session: Optional[requests.Session] = None):
        """Initialize client.

        Args:
            session: Session to send requests through (injectable for tests)
        """
        self.session = session or requests.Session()

    def post_json(
        self,
        url: str,
        body: Mapping[str, Any],
        params: Optional[Mapping[str, str]] = None,
        timeout: float = 10.0,
    ) -> UpstreamResponse:
        """POST a JSON body (USDA-style search)."""
        return self._send(
            "POST",
            url,
            json=dict(body),
            params=dict(params or {}),
            headers={"Content-Type": "application/json"},
            timeout=timeout,
        )

    def get(
        self,
        url: str,
        params: Optional[Mapping[str, str]] = None,
        timeout: float = 10.0,
    ) -> UpstreamResponse:
        """GET with query parameters (generic search)."""
        return self._send("GET", url, params=dict(params or {}), timeout=timeout)

    def post_form(
        self,
        url: str,
        fields: List[Tuple[str, str]],
        headers: Optional[Dict[str, str]] = None,
        timeout: float = 15.0,
    ) -> UpstreamResponse:
        """POST URL-encoded form fields (ingredient parsing)."""
        all_headers = {"content-type": "application/x-www-form-urlencoded"}
        all_headers.update(headers or {})
        return self._send(
            "POST",
            url,
            data=urlencode(fields),
            headers=all_headers,
            timeout=timeout,
        )

    def _send(self, method: str, url: str, **kwargs) -> UpstreamResponse:
        """Issue one request.

        Raises:
            UpstreamUnreachableError: If no response was received
        """
        try:
            response = self.session.request(method, url, **kwargs)
        except requests.exceptions.Timeout as e:
            logger.error("Upstream %s %s timed out: %s", method, url, e)
            raise UpstreamUnreachableError("Upstream request timed out", str(e)) from e
        except requests.exceptions.ConnectionError as e:
            logger.error("Upstream %s %s unreachable: %s", method, url, e)
            raise UpstreamUnreachableError("Failed to connect to upstream provider", str(e)) from e
        except requests.exceptions.RequestException as e:
            logger.error("Upstream %s %s failed: %s", method, url, e)
            raise UpstreamUnreachableError("Upstream request failed", str(e)) from e

        return UpstreamResponse(
            status_code=response.status_code,
            body=self._decode_body(response),
            reason=response.reason or "",
        )

    @staticmethod
    def _decode_body(response: requests.Response) -> Any:
        """Decode JSON, falling back to text.

        An empty error response is described by its reason phrase; an empty
        success response decodes to None.
        """
        try:
            return response.json()
        except ValueError:
            pass
        if response.text:
            return response.text
        if 200 <= response.status_code < 300:
            return None
        return response.reason or None
