"""
Base provider with bounded timeouts, uniform error mapping, and logging.

Every provider inherits from HttpProvider and gets:
- A shared or per-call ``httpx.AsyncClient`` with the configured timeout
- ``get_json()``: GET + status check + JSON decode, every failure mapped
  onto the ProviderError hierarchy
- ``items_at()``: pull the list of items out of a nested payload
- Structured logging of status, item count and elapsed time

No retries: a failed call surfaces to the caller immediately.
"""

import abc
import time
from datetime import datetime
from typing import Any, Optional, Protocol

import httpx

from city_explorer.config import ProviderSettings, settings
from city_explorer.logging_config import get_logger
from city_explorer.exceptions import (
    ProviderPayloadError,
    ProviderResponseError,
    ProviderTimeoutError,
)

logger = get_logger(__name__)

# Rendering used for every date column, e.g. "Mon Oct 19 2026"
DATE_FORMAT = "%a %b %d %Y"


class LocationLike(Protocol):
    """What a category provider needs to know about a resolved location."""

    id: Optional[int]
    formatted_query: Optional[str]
    latitude: Optional[float]
    longitude: Optional[float]


def format_date(value: datetime) -> str:
    return value.strftime(DATE_FORMAT)


class HttpProvider:
    """
    HTTP plumbing shared by every remote provider.

    Holds the provider settings and an optional shared client. Subclasses
    set ``NAME``, the short provider name used in logs and errors.
    """

    NAME: str = ""

    def __init__(
        self,
        client: httpx.AsyncClient | None = None,
        config: ProviderSettings | None = None,
    ):
        """
        Args:
            client: Shared async client. When omitted a short-lived client
                is opened for each call.
            config: Override provider settings. Useful for testing.
        """
        self.config = config or settings.providers
        self._client = client

    # ─── HTTP ───────────────────────────────────────────────

    async def get_json(
        self,
        url: str,
        params: dict[str, Any] | None = None,
        headers: dict[str, str] | None = None,
    ) -> dict[str, Any]:
        """
        GET ``url`` and return the decoded JSON object.

        Raises:
            ProviderTimeoutError: Timeout or transport failure.
            ProviderResponseError: Non-2xx status.
            ProviderPayloadError: Body is not a JSON object.
        """
        start = time.monotonic()
        try:
            if self._client is not None:
                response = await self._client.get(url, params=params, headers=headers)
            else:
                async with httpx.AsyncClient(timeout=self.config.timeout) as client:
                    response = await client.get(url, params=params, headers=headers)
        except httpx.TimeoutException as e:
            logger.warning("%s timeout | %dms", self.NAME, self._elapsed_ms(start))
            raise ProviderTimeoutError(
                message=f"{self.NAME} request timed out",
                details={"provider": self.NAME},
            ) from e
        except httpx.HTTPError as e:
            logger.warning("%s network error | %dms | %s", self.NAME, self._elapsed_ms(start), str(e)[:200])
            raise ProviderTimeoutError(
                message=f"{self.NAME} request failed",
                details={"provider": self.NAME},
            ) from e

        elapsed_ms = self._elapsed_ms(start)
        if not response.is_success:
            logger.warning("%s | status=%d | %dms", self.NAME, response.status_code, elapsed_ms)
            raise ProviderResponseError(
                message=f"{self.NAME} returned HTTP {response.status_code}",
                details={"provider": self.NAME, "status": response.status_code},
            )

        try:
            payload = response.json()
        except ValueError as e:
            raise ProviderPayloadError(
                message=f"{self.NAME} returned a non-JSON body",
                details={"provider": self.NAME},
            ) from e
        if not isinstance(payload, dict):
            raise ProviderPayloadError(
                message=f"{self.NAME} returned {type(payload).__name__}, expected an object",
                details={"provider": self.NAME},
            )

        logger.info("%s OK | %dms", self.NAME, elapsed_ms)
        return payload

    def items_at(self, payload: dict[str, Any], *path: str) -> list[dict[str, Any]]:
        """
        Walk ``path`` into ``payload`` and return the list found there.

        ``items_at(body, "daily", "data")`` returns ``body["daily"]["data"]``.
        """
        node: Any = payload
        for key in path:
            if not isinstance(node, dict) or key not in node:
                raise ProviderPayloadError(
                    message=f"{self.NAME} payload is missing '{'.'.join(path)}'",
                    details={"provider": self.NAME, "path": list(path)},
                )
            node = node[key]
        if not isinstance(node, list):
            raise ProviderPayloadError(
                message=f"{self.NAME} payload '{'.'.join(path)}' is not a list",
                details={"provider": self.NAME, "path": list(path)},
            )
        logger.debug("%s | items=%d", self.NAME, len(node))
        return node

    @staticmethod
    def _elapsed_ms(start: float) -> int:
        return int((time.monotonic() - start) * 1000)


class BaseProvider(HttpProvider, abc.ABC):
    """
    Abstract base class for the providers behind a cached category.

    Subclasses must implement:
        - fetch(location) -> list[dict]: raw provider items
        - parse(item) -> dict: one item mapped onto record columns
    """

    @abc.abstractmethod
    async def fetch(self, location: LocationLike) -> list[dict[str, Any]]:
        """
        Fetch the raw items for a resolved location.

        Raises:
            ProviderError: On timeout, network failure, non-success status
                or a payload without the expected list.
        """
        ...

    @abc.abstractmethod
    def parse(self, item: dict[str, Any]) -> dict[str, Any]:
        """Map one raw item onto record column values."""
        ...
