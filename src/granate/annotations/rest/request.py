import json
from collections.abc import AsyncIterator, Mapping
from contextlib import asynccontextmanager
from dataclasses import dataclass, field
from typing import Any

import httpx

from granate import log
from granate.errors import RestRequestError


@dataclass(frozen=True)
class RequestDescriptor:
    """One fully resolved outbound REST request.

    Attributes:
        method: HTTP method, case insensitive.
        url: URL, absolute or relative to ``base_url``.
        base_url: Base URL, None when ``url`` is absolute.
        parameters: Query string parameters for GET, body otherwise.
        headers: Request headers.
        result_field: Field of the response body to return instead of the whole body.
        json: Whether the body is JSON encoded and the response JSON decoded.
        jar: Whether the request shares the cookie jar of the operation.
    """

    method: str
    url: str
    base_url: str | None = None
    parameters: Mapping[str, Any] = field(default_factory=dict)
    headers: Mapping[str, str] = field(default_factory=dict)
    result_field: str | None = None
    json: bool = True
    jar: bool = True

    @property
    def full_url(self) -> str:
        if not self.base_url:
            return self.url
        return f"{self.base_url.rstrip('/')}/{self.url.lstrip('/')}"


def serialize_request_key(descriptor: RequestDescriptor) -> str:
    """
    Return the key under which equivalent requests are coalesced.

    Two descriptors are equivalent when their method, base URL, URL, parameters and
    result field are equal. Headers are not part of the key. The components are JSON
    encoded, so separators inside values and the types of parameter values are kept.
    """
    return json.dumps(
        [
            descriptor.method.lower(),
            descriptor.base_url or "",
            descriptor.url,
            dict(sorted(descriptor.parameters.items())),
            descriptor.result_field or "",
        ],
        sort_keys=True,
        default=str,
    )


class HttpSession:
    """Owns the HTTP client shared by the requests of one operation.

    Requests with ``jar`` set go through one client, and so share its cookies.
    Other requests use a client of their own.
    """

    def __init__(self, timeout: float = 30.0, transport: httpx.AsyncBaseTransport | None = None) -> None:
        self._timeout = timeout
        self._transport = transport
        self._client: httpx.AsyncClient | None = None

    def _create_client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(timeout=self._timeout, transport=self._transport)

    @asynccontextmanager
    async def client(self, jar: bool = True) -> AsyncIterator[httpx.AsyncClient]:
        if not jar:
            async with self._create_client() as client:
                yield client
            return

        if self._client is None:
            self._client = self._create_client()
        yield self._client

    async def aclose(self) -> None:
        if self._client is not None:
            await self._client.aclose()
            self._client = None


async def make_request(descriptor: RequestDescriptor, session: HttpSession) -> Any:
    """
    Send a request and return its body.

    Args:
        descriptor: The request to send.
        session: The HTTP session of the operation.

    Returns:
        Any: The decoded JSON body when ``descriptor.json`` is set, the text body otherwise.

    Raises:
        RestRequestError: If the response status is not 200.
        httpx.HTTPError: If the request could not be sent.
    """
    method = descriptor.method.upper()
    parameters = dict(descriptor.parameters)
    request_arguments: dict[str, Any] = {"headers": dict(descriptor.headers)}
    if method == "GET":
        request_arguments["params"] = parameters
    elif descriptor.json:
        request_arguments["json"] = parameters
    else:
        request_arguments["data"] = parameters

    log.debug(f"Sending {method} {descriptor.full_url}")
    async with session.client(descriptor.jar) as client:
        response = await client.request(method, descriptor.full_url, **request_arguments)

    if response.status_code != 200:
        raise RestRequestError(
            f"{method} {descriptor.full_url} failed: {response.status_code} {response.reason_phrase}",
            status_code=response.status_code,
        )

    return response.json() if descriptor.json else response.text
