"""Normalizes the `Host` header and derives the server from a URL value.

`Host: https://api.example.com` points the request at that scheme, host
and port, and the header is rewritten to `api.example.com` since servers
reject a URL in the Host header. A bare `Host: api.example.com:8443` only
names the virtual host: the server stays the one from the front matter and
the header is kept as `host[:port]`. Values that cannot be parsed are left
alone.
"""

import logging

from reqmd.parser.address import Address, AddressError
from reqmd.processor.base import Processor
from reqmd.request import Request

logger = logging.getLogger(__name__)


class HostHeader(Processor):
    name = "host-header"

    def apply(self, request: Request) -> Request:
        value = request.headers.first("host")
        if value is None:
            return request

        value = value.strip()
        is_url = "://" in value
        try:
            if is_url:
                address = Address.parse(value)
            else:
                address = Address.from_authority(value, scheme=request.address.scheme)
        except AddressError as e:
            logger.debug("ignoring Host header %r: %s", value, e)
            return request

        updated = request.model_copy(deep=True)
        if is_url:
            updated.address = address
        for pair in updated.headers.values_for_mut("host"):
            pair.value = address.authority
        return updated
