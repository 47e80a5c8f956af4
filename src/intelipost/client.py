import asyncio
from typing import Optional

import httpx
from pydantic import ValidationError

from src.intelipost.errors import TransportError, TransportErrorKind
from src.intelipost.schemas import QuoteRequestDocument, QuoteResponse
from src.logger import setup_logger


DEFAULT_TIMEOUT = 5.0

logger = setup_logger('intelipost.client')


class QuoteClient:
    def __init__(
        self,
        base_url: str,
        api_key: str,
        timeout: float = DEFAULT_TIMEOUT,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.base_url = base_url.rstrip('/')
        self.api_key = api_key
        self.timeout = timeout
        self.transport = transport

    @property
    def quote_url(self) -> str:
        return f'{self.base_url}/quote'

    def headers(self) -> dict:
        return {
            'Content-Type': 'application/json',
            'Accept': 'application/json',
            'api_key': self.api_key,
        }

    async def _post(self, body: str) -> httpx.Response:
        async with httpx.AsyncClient(timeout=self.timeout, transport=self.transport) as client:
            response = await client.post(self.quote_url, content=body, headers=self.headers())
            response.raise_for_status()
            return response

    async def quote(self, document: QuoteRequestDocument) -> QuoteResponse:
        """
        Send one quote request. Every failure, including an unexpected
        response body, comes back as TransportError.

        The timeout bounds the whole exchange, not each connect or read.
        """
        body = document.model_dump_json()

        try:
            response = await asyncio.wait_for(self._post(body), self.timeout)
        except (asyncio.TimeoutError, httpx.TimeoutException) as e:
            raise TransportError(
                TransportErrorKind.TIMEOUT,
                f'Intelipost did not answer within {self.timeout}s: {str(e)}'
            ) from e
        except httpx.HTTPStatusError as e:
            raise TransportError(
                TransportErrorKind.HTTP_STATUS,
                f'Intelipost returned {e.response.status_code}: {e.response.text}',
                status_code=e.response.status_code,
            ) from e
        except httpx.RequestError as e:
            raise TransportError(
                TransportErrorKind.CONNECTION,
                f'Intelipost request failed: {str(e)}'
            ) from e

        try:
            data = response.json()
        except ValueError as e:
            raise TransportError(
                TransportErrorKind.INVALID_RESPONSE,
                f'Intelipost returned malformed JSON: {str(e)}'
            ) from e

        try:
            quote_response = QuoteResponse.model_validate(data)
        except ValidationError as e:
            raise TransportError(
                TransportErrorKind.INVALID_RESPONSE,
                f'Unexpected Intelipost response shape: {str(e)}'
            ) from e

        logger.info(
            f"Intelipost answered with {len(quote_response.content.delivery_options)} delivery option(s)"
        )
        return quote_response
