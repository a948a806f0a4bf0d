"""
Inkpost Client — HTTP Transport
================================

What:  Thin wrapper over httpx.AsyncClient for the Inkpost REST API.
How:   Prefixes paths with the API prefix, attaches the session's bearer
       token, drops None query parameters, decodes JSON, and turns error
       responses into ApiError carrying the server's `message`.
"""

import logging
import uuid
from typing import Any, Dict, Mapping, Optional

import httpx

from inkpost.client.session import Session

logger = logging.getLogger(__name__)

DEFAULT_BASE_URL = "http://localhost:3333"


class ApiError(Exception):
    """Non-2xx response, or a request that never reached the server (status 0)."""

    def __init__(
        self,
        status_code: int,
        message: str,
        error: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
    ):
        self.status_code = status_code
        self.message = message
        self.error = error
        self.details = details or {}
        super().__init__(message)

    @classmethod
    def from_response(cls, response: httpx.Response) -> "ApiError":
        try:
            body = response.json()
        except ValueError:
            body = {}
        if not isinstance(body, dict):
            body = {}
        message = body.get("message") or f"HTTP {response.status_code}: {response.reason_phrase}"
        return cls(
            status_code=response.status_code,
            message=message,
            error=body.get("error"),
            details=body.get("details"),
        )


def _encode_params(params: Optional[Mapping[str, Any]]) -> Dict[str, Any]:
    encoded: Dict[str, Any] = {}
    for key, value in (params or {}).items():
        if value is None:
            continue
        if isinstance(value, uuid.UUID):
            value = str(value)
        encoded[key] = value
    return encoded


class ApiClient:
    """
    Usage:
        session = Session(JsonFileStorage("~/.inkpost/session.json"))
        async with ApiClient("http://localhost:3333", session=session) as api:
            posts = await api.get("/posts", params={"published": True})

    Tests pass `transport=httpx.ASGITransport(app=app)` to talk to the app
    in-process.
    """

    def __init__(
        self,
        base_url: str = DEFAULT_BASE_URL,
        session: Optional[Session] = None,
        api_prefix: str = "/api",
        transport: Optional[httpx.AsyncBaseTransport] = None,
        timeout: Optional[float] = 10.0,
    ):
        self.session = session if session is not None else Session()
        self.api_prefix = api_prefix.rstrip("/")
        self._client = httpx.AsyncClient(
            base_url=base_url,
            transport=transport,
            timeout=timeout,
            headers={"Content-Type": "application/json"},
        )

    async def __aenter__(self) -> "ApiClient":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._client.aclose()

    def _url(self, path: str) -> str:
        if self.api_prefix and path.startswith(self.api_prefix + "/"):
            return path
        return f"{self.api_prefix}{path}"

    async def request(
        self,
        method: str,
        path: str,
        params: Optional[Mapping[str, Any]] = None,
        json: Any = None,
    ) -> Any:
        """
        Send a request and return the decoded JSON body (None for empty bodies).

        Raises:
            ApiError: Error status from the server, or a transport failure
                (status_code 0, "Network error occurred").
        """
        headers = {}
        token = self.session.token
        if token:
            headers["Authorization"] = f"Bearer {token}"

        try:
            response = await self._client.request(
                method,
                self._url(path),
                params=_encode_params(params),
                json=json,
                headers=headers,
            )
        except httpx.HTTPError as e:
            logger.warning("%s %s failed: %s", method, path, e)
            raise ApiError(status_code=0, message="Network error occurred")

        if response.is_error:
            raise ApiError.from_response(response)

        if response.status_code == 204 or not response.content:
            return None
        return response.json()

    async def get(self, path: str, params: Optional[Mapping[str, Any]] = None) -> Any:
        return await self.request("GET", path, params=params)

    async def post(self, path: str, data: Any = None) -> Any:
        return await self.request("POST", path, json=data)

    async def patch(self, path: str, data: Any = None) -> Any:
        return await self.request("PATCH", path, json=data)

    async def delete(self, path: str) -> Any:
        return await self.request("DELETE", path)
