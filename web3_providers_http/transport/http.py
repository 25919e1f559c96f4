import errno
from http.client import OK
from typing import Any, Dict, Optional

import httpx

from . import ConnectionRefused, HttpTransport, ResponseError, TransportError


def refused(exc: BaseException) -> bool:
    """
    Whether the connection was actively refused by the peer.

    httpx raises ``ConnectError`` for DNS, routing and TLS failures as well, so the
    OS level cause is looked up in the chain of causes, contexts and exception groups.
    """
    seen = set()
    pending = [exc]
    while pending:
        current = pending.pop()
        if current is None or id(current) in seen:
            continue
        seen.add(id(current))
        if isinstance(current, ConnectionRefusedError) or getattr(current, "errno", None) == errno.ECONNREFUSED:
            return True
        pending.extend([current.__cause__, current.__context__, *getattr(current, "exceptions", ())])
    return False


class HttpxTransport(HttpTransport):
    """
    Transport over a single ``httpx.AsyncClient`` bound to ``base_url``.

    Extra keyword arguments go to the client constructor, which is how a custom
    ``httpx`` transport, default headers or a timeout are configured.
    """

    def __init__(self, base_url: str, **client_kwargs):
        self.base_url = base_url
        self.client = httpx.AsyncClient(base_url=base_url, **client_kwargs)

    def _url(self, path: str) -> str:
        # httpx would append a trailing slash to the base url for an empty path
        if not path:
            return self.base_url
        return f"{self.base_url.rstrip('/')}/{path.lstrip('/')}"

    async def post(self, path: str, body: Any, options: Optional[Dict[str, Any]] = None) -> Any:
        try:
            response = await self.client.post(self._url(path), json=body, **(options or {}))
        except httpx.HTTPError as exc:
            if refused(exc):
                raise ConnectionRefused(str(exc)) from exc
            raise TransportError(str(exc)) from exc

        if response.status_code != OK:
            raise ResponseError(response.status_code, response.text)
        try:
            return response.json()
        except ValueError as exc:
            raise TransportError(f"Expected a JSON response, got: {response.text}") from exc

    async def aclose(self):
        await self.client.aclose()
