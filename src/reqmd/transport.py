"""Sending requests over the network.

Extraction and processing never touch the network; anything that needs to
send goes through a `Transport`.
"""

import logging
from typing import Protocol

import requests
from pydantic import BaseModel, Field

from reqmd.errors import TransportError
from reqmd.parser.multimap import Headers
from reqmd.request import Request

logger = logging.getLogger(__name__)


class Response(BaseModel):
    status: int
    headers: Headers = Field(default_factory=Headers)
    body: str = ""


class Transport(Protocol):
    def send(self, request: Request) -> Response:
        ...


class RequestsTransport:
    """Transport backed by a `requests` session."""

    def __init__(self, timeout: float | None = None, session: requests.Session | None = None):
        self.timeout = timeout
        self.session = session or requests.Session()

    def send(self, request: Request) -> Response:
        headers: dict[str, str] = {}
        for pair in request.headers:
            # requests takes a mapping, so repeated headers are folded into one line
            existing = next((k for k in headers if k.lower() == pair.key.lower()), None)
            if existing is None:
                headers[pair.key] = pair.value
            else:
                headers[existing] = f"{headers[existing]}, {pair.value}"

        body = request.body.content
        logger.debug("sending %s %s", request.method.value, request.url)
        try:
            resp = self.session.request(
                request.method.value,
                request.url,
                headers=headers,
                data=body.encode("utf-8") if body is not None else None,
                timeout=self.timeout,
            )
        except requests.RequestException as e:
            raise TransportError(f"{request.method.value} {request.url} failed: {e}") from e

        return Response(
            status=resp.status_code,
            headers=Headers.of(resp.headers.items()),
            body=resp.text,
        )
