"""
Quote Retrieval.

HTTP client for the text-retrieval collaborator that supplies note
augmentations. Any transport error, non-success status or malformed
payload surfaces as a RetrievalError; callers never see httpx errors.

Resilience stack (outside-in): retry on transport errors → request
timeout.

Usage:
    client = QuoteClient()
    quote = await client.fetch()
    await client.close()
"""

from typing import Any, Protocol

import httpx
from pydantic import ValidationError as PydanticValidationError

from noteboard.engine.core.config import get_app_config, get_settings
from noteboard.engine.core.config_schema import QuotesSchema
from noteboard.engine.core.exceptions import RetrievalError
from noteboard.engine.core.logging import get_logger
from noteboard.engine.core.resilience import create_retrying
from noteboard.engine.schemas.quote import Quote

logger = get_logger(__name__)


class TextRetriever(Protocol):
    """Anything that can produce a quote or raise RetrievalError."""

    async def fetch(self) -> Quote:
        ...


class QuoteClient:
    """
    Async HTTP client for the quote endpoint.

    Features:
    - Endpoint, payload field names and timeouts from quotes.yaml
    - Optional API key from config/.env
    - Retry with exponential backoff on transport errors

    Usage:
        client = QuoteClient()
        text = await note.fetch_augmentation(client)
    """

    def __init__(
        self,
        config: QuotesSchema | None = None,
        api_key: str | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        """
        Initialize the client.

        Args:
            config: Quote settings. If None, reads config/settings/quotes.yaml.
            api_key: Key sent as X-Api-Key. If None, reads QUOTES_API_KEY from config/.env.
            transport: Custom httpx transport (tests use httpx.MockTransport).
        """
        self._config = config or get_app_config().quotes
        self._api_key = api_key if api_key is not None else get_settings().quotes_api_key
        self._transport = transport
        self._client: httpx.AsyncClient | None = None

    async def _get_client(self) -> httpx.AsyncClient:
        """Get or create the HTTP client."""
        if self._client is None or self._client.is_closed:
            headers = {"Accept": "application/json"}
            if self._api_key:
                headers["X-Api-Key"] = self._api_key
            self._client = httpx.AsyncClient(
                timeout=self._config.timeout_seconds,
                headers=headers,
                transport=self._transport,
            )
        return self._client

    async def close(self) -> None:
        """Close the HTTP client."""
        if self._client and not self._client.is_closed:
            await self._client.aclose()
            self._client = None

    async def __aenter__(self) -> "QuoteClient":
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.close()

    async def fetch(self) -> Quote:
        """
        Fetch one quote.

        Returns:
            The retrieved quote

        Raises:
            RetrievalError: On any failure
        """
        try:
            payload = await self._request()
        except httpx.HTTPStatusError as e:
            raise RetrievalError(
                f"Quote service returned {e.response.status_code}"
            ) from e
        except (httpx.HTTPError, ValueError) as e:
            raise RetrievalError(f"Failed to fetch quote: {e}") from e

        return self._parse(payload)

    async def _request(self) -> Any:
        client = await self._get_client()
        retry = self._config.retry

        async for attempt in create_retrying(
            retry_on=(httpx.TransportError,),
            max_attempts=retry.max_attempts,
            backoff_multiplier=retry.backoff_multiplier,
            backoff_max=retry.backoff_max,
        ):
            with attempt:
                response = await client.get(self._config.url)

        response.raise_for_status()
        logger.debug("Quote fetched", extra={"status_code": response.status_code})
        return response.json()

    def _parse(self, payload: Any) -> Quote:
        # Some quote APIs wrap a single result in a list
        if isinstance(payload, list) and len(payload) == 1:
            payload = payload[0]

        if not isinstance(payload, dict):
            raise RetrievalError("Malformed quote payload")

        fields = self._config.fields
        try:
            return Quote(
                text=payload.get(fields.text),
                attribution=payload.get(fields.attribution),
            )
        except PydanticValidationError as e:
            raise RetrievalError("Malformed quote payload") from e
