"""
kneeklinic/services/api_client.py

Purpose: HTTP access to the KneeKlinic backend

- Resolves every path against {API_BASE_URL}/api
- Adds the stored bearer token to each request
- Logs requests and responses (never the token)
- Maps failures to the KneeKlinic error taxonomy
- Clears the stored token and user on 401
"""

import httpx
from typing import Any, Callable, Dict, List, Optional

from kneeklinic.core.config import settings
from kneeklinic.core.errors import UNEXPECTED_RESPONSE_MESSAGE, error_from_response, error_from_transport
from kneeklinic.core.exceptions import ApiError
from kneeklinic.core.logging import get_logger, LogContext
from kneeklinic.utils.constants import STORAGE_KEY_TOKEN, STORAGE_KEY_USER

logger = get_logger(__name__)


class ApiClient:
    """
    Thin async wrapper around httpx for the patient API.

    A short-lived httpx.AsyncClient is opened per request. Pass `transport`
    to route requests somewhere other than the network (tests mount a fake
    backend through httpx.ASGITransport).
    """

    def __init__(
        self,
        store,
        base_url: Optional[str] = None,
        timeout: Optional[float] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.store = store
        self.base_url = (base_url or settings.api_url).rstrip("/")
        self._timeout = timeout if timeout is not None else settings.API_TIMEOUT_SECONDS
        self._transport = transport
        self._unauthorized_callbacks: List[Callable[[], None]] = []

    def on_unauthorized(self, callback: Callable[[], None]) -> None:
        """Registers a callback fired after a 401 cleared the stored credentials."""
        self._unauthorized_callbacks.append(callback)

    def _auth_headers(self) -> Dict[str, str]:
        token = self.store.get_item(STORAGE_KEY_TOKEN)
        if token:
            return {"Authorization": f"Bearer {token}"}
        return {}

    def _handle_unauthorized(self) -> None:
        logger.warning("401 Unauthorized - Clearing tokens")
        self.store.multi_remove([STORAGE_KEY_TOKEN, STORAGE_KEY_USER])
        for callback in self._unauthorized_callbacks:
            callback()

    async def request(
        self,
        method: str,
        path: str,
        *,
        json: Optional[Any] = None,
        params: Optional[Dict[str, Any]] = None,
        data: Optional[Dict[str, Any]] = None,
        files: Optional[Dict[str, Any]] = None,
    ) -> Any:
        """
        Sends one request and returns the decoded JSON body.

        Args:
            method: HTTP method
            path: Path relative to the /api base (e.g. "auth/login")
            json: JSON body
            params: Query string parameters
            data: Form fields (multipart when `files` is given)
            files: Multipart files as {field: (filename, content, content_type)}

        Returns:
            Decoded JSON body, or an empty dict for empty responses

        Raises:
            KneeKlinicError subclass for transport failures and non-2xx answers
        """
        path = path.lstrip("/")
        method = method.upper()

        with LogContext(endpoint=path, method=method):
            logger.debug(f"API Request: {method} {self.base_url}/{path}")

            try:
                async with httpx.AsyncClient(
                    base_url=self.base_url,
                    timeout=self._timeout,
                    transport=self._transport,
                    headers=self._auth_headers(),
                ) as client:
                    response = await client.request(
                        method,
                        path,
                        json=json,
                        params=params,
                        data=data,
                        files=files,
                    )
            except httpx.HTTPError as e:
                raise error_from_transport(e, endpoint=path) from e

            if response.is_error:
                logger.error(
                    f"API Error: {method} {path} -> {response.status_code}",
                    extra={"status_code": response.status_code}
                )
                if response.status_code == 401:
                    self._handle_unauthorized()
                raise error_from_response(response)

            logger.info(
                f"API Response: {method} {path} -> {response.status_code}",
                extra={"status_code": response.status_code}
            )

            if not response.content:
                return {}

            try:
                return response.json()
            except ValueError:
                logger.error(f"Non-JSON response from {path}")
                raise ApiError(UNEXPECTED_RESPONSE_MESSAGE, status_code=response.status_code)

    async def get(self, path: str, params: Optional[Dict[str, Any]] = None) -> Any:
        return await self.request("GET", path, params=params)

    async def post(self, path: str, json: Optional[Any] = None, **kwargs) -> Any:
        return await self.request("POST", path, json=json, **kwargs)

    async def put(self, path: str, json: Optional[Any] = None, **kwargs) -> Any:
        return await self.request("PUT", path, json=json, **kwargs)

    async def delete(self, path: str) -> Any:
        return await self.request("DELETE", path)
