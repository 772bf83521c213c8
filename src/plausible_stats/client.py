"""
HTTP client for the Plausible Stats API v2.
"""
import logging
from typing import Any, Optional, Union

import httpx

from .config import (
    DEFAULT_TIMEOUT_SECONDS,
    RATE_LIMIT_PER_HOUR,
    PlausibleConfig,
)
from .errors import PlausibleApiError
from .models import PlausibleErrorPayload, QueryParams, QueryResponse

logger = logging.getLogger(__name__)


class PlausibleClient:
    """Client for the Stats API query endpoint.

    Holds only its configuration, so one instance can serve any number of
    concurrent queries. Each query opens and closes its own connection.

    Usage:
        client = PlausibleClient(api_key="your-api-key")

        response = await client.query(QueryParams(
            site_id="example.com",
            date_range="7d",
            metrics=["visitors", "pageviews"],
        ))
        for row in response.results:
            print(row)
    """

    def __init__(
        self,
        api_key: str,
        base_url: Optional[str] = None,
        *,
        timeout: float = DEFAULT_TIMEOUT_SECONDS,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.config = PlausibleConfig(api_key=api_key, base_url=base_url, timeout=timeout)
        self._transport = transport

    @classmethod
    def from_config(
        cls,
        config: PlausibleConfig,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> "PlausibleClient":
        return cls(
            api_key=config.api_key,
            base_url=config.base_url,
            timeout=config.timeout,
            transport=transport,
        )

    @classmethod
    def from_env(cls) -> "PlausibleClient":
        """Create a client from PLAUSIBLE_API_KEY / PLAUSIBLE_BASE_URL."""
        return cls.from_config(PlausibleConfig.from_env())

    @property
    def base_url(self) -> str:
        return self.config.base_url

    @property
    def rate_limit(self) -> int:
        """Documented requests-per-hour quota. Not enforced by the client."""
        return RATE_LIMIT_PER_HOUR

    def _headers(self) -> dict[str, str]:
        return {
            "Authorization": f"Bearer {self.config.api_key}",
            "Content-Type": "application/json",
        }

    async def query(self, params: Union[QueryParams, dict[str, Any]]) -> QueryResponse:
        """Execute a query against the Stats API.

        Args:
            params: Query parameters, or a dict with the same fields

        Returns:
            The parsed response, exactly as the API returned it

        Raises:
            PlausibleApiError: If the API answers with a non-2xx status
            httpx.TransportError: On network failures, unchanged
            json.JSONDecodeError: If a response body is not JSON
            httpx.TooManyRedirects: If redirects do not settle; redirects
                are followed like a browser fetch would
            pydantic.ValidationError: If params are invalid or a success
                body does not have the expected shape
        """
        if not isinstance(params, QueryParams):
            params = QueryParams.model_validate(params)

        url = self.config.query_url
        logger.debug(f"POST {url} site_id={params.site_id}")

        async with httpx.AsyncClient(
            timeout=self.config.timeout,
            follow_redirects=True,
            transport=self._transport,
        ) as client:
            response = await client.post(
                url,
                headers=self._headers(),
                json=params.to_body(),
            )

        logger.debug(f"{url} returned HTTP {response.status_code}")

        if not response.is_success:
            raise self._api_error(response)

        result = QueryResponse.model_validate(response.json())
        if result.meta and result.meta.warning:
            logger.warning(f"Plausible query for {params.site_id}: {result.meta.warning}")
        return result

    def _api_error(self, response: httpx.Response) -> PlausibleApiError:
        """Map a non-2xx response to a PlausibleApiError."""
        data = response.json()

        if isinstance(data, dict) and isinstance(data.get("error"), str):
            message = PlausibleErrorPayload.model_validate(data).error
        else:
            message = f"HTTP {response.status_code}"

        logger.warning(f"Plausible API error ({response.status_code}): {message}")
        return PlausibleApiError(message, response.status_code, data)
