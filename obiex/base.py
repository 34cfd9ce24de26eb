import logging
from typing import Any

import aiohttp
from yarl import URL

from .config import base_url
from .errors import ServerError
from .signing import Credentials, RequestSigner
from .utils import build_query_string, strip_empty_values


class BaseRESTClient:
    """Signed JSON transport over an aiohttp session.

    Every request is signed over its path and query string before it is sent.
    Non-2xx responses with a JSON body are raised as :class:`ServerError`;
    anything else aiohttp raises is left untouched. There are no retries.
    """

    def __init__(
        self,
        credentials: Credentials,
        sandbox_mode: bool = False,
        session: aiohttp.ClientSession | None = None,
        proxy: str | None = None,
    ) -> None:
        self.signer = RequestSigner(credentials)
        self.base_url = base_url(sandbox_mode)
        self.sandbox_mode = sandbox_mode
        self.proxy = proxy
        self.session = session
        self._owns_session = session is None
        self.logger = logging.getLogger(self.__class__.__name__)

    def _get_session(self) -> aiohttp.ClientSession:
        if self.session is None:
            self.session = aiohttp.ClientSession()
        return self.session

    async def close(self) -> None:
        """Close the HTTP session if this client created it."""
        if self._owns_session and self.session is not None:
            await self.session.close()
            self.session = None

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.close()

    @staticmethod
    def canonical_path(path: str, params: dict | None = None) -> str:
        query = build_query_string(strip_empty_values(params))
        return f"{path}?{query}" if query else path

    async def _request(
        self,
        method: str,
        path: str,
        params: dict | None = None,
        body: dict | None = None,
    ) -> Any:
        method = method.upper()
        signed_path = self.canonical_path(path, params)
        headers = self.signer.headers(method, signed_path, has_body=body is not None)
        # The query string is already encoded and signed; yarl must not requote it.
        url = URL(f"{self.base_url}{signed_path}", encoded=True)

        self.logger.debug("%s %s", method, signed_path)
        async with self._get_session().request(
            method,
            url,
            headers=headers,
            json=body,
            proxy=self.proxy,
        ) as resp:
            self.logger.debug("%s %s -> %s", method, signed_path, resp.status)
            if not 200 <= resp.status < 300:
                await self._raise_for_response(resp)
            return await resp.json(content_type=None)

    async def _raise_for_response(self, resp: aiohttp.ClientResponse) -> None:
        try:
            data = await resp.json(content_type=None)
        except ValueError:
            data = None
        if data:
            message = data.get("message") if isinstance(data, dict) else None
            message = message or resp.reason or f"HTTP {resp.status}"
            self.logger.warning("Request failed with status %s: %s", resp.status, message)
            raise ServerError(message, data, resp.status)
        resp.raise_for_status()

    async def _get_data(
        self,
        method: str,
        path: str,
        params: dict | None = None,
        body: dict | None = None,
    ) -> Any:
        """Send a request and unwrap the ``data`` member of the response envelope."""
        envelope = await self._request(method, path, params=params, body=body)
        if envelope is None:
            return None
        return envelope.get("data")
