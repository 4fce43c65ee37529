"""Server address parsing: scheme, host and optional port."""

import ipaddress
from enum import Enum
from urllib.parse import urlsplit

from pydantic import BaseModel


class AddressError(ValueError):
    """Raised when a string is not a usable http(s) address."""


class Scheme(str, Enum):
    HTTP = "http"
    HTTPS = "https"


class Address(BaseModel):
    """Where requests are sent. Defaults to `http://localhost`."""

    scheme: Scheme = Scheme.HTTP
    host: str = "localhost"
    port: int | None = None

    @classmethod
    def parse(cls, url: str) -> "Address":
        """Parse a URL such as `https://example.com:8080`."""
        try:
            parts = urlsplit(url.strip())
            port = parts.port
        except ValueError as e:
            raise AddressError(f"invalid address {url!r}: {e}") from e

        scheme = parts.scheme.lower()
        if scheme not in ("http", "https"):
            raise AddressError(f"invalid address {url!r}: scheme must be http or https")
        if not parts.hostname:
            raise AddressError(f"invalid address {url!r}: missing host")

        return cls(scheme=Scheme(scheme), host=parts.hostname, port=port)

    @classmethod
    def from_authority(cls, authority: str, scheme: Scheme = Scheme.HTTP) -> "Address":
        """Parse a bare `host[:port]` value as found in a Host header."""
        if "://" in authority:
            raise AddressError(f"{authority!r} is a URL, not a host")
        return cls.parse(f"{scheme.value}://{authority.strip()}")

    @property
    def host_kind(self) -> str:
        """One of `domain`, `ipv4` or `ipv6`."""
        try:
            ip = ipaddress.ip_address(self.host)
        except ValueError:
            return "domain"
        return f"ipv{ip.version}"

    @property
    def authority(self) -> str:
        host = f"[{self.host}]" if self.host_kind == "ipv6" else self.host
        if self.port is None:
            return host
        return f"{host}:{self.port}"

    @property
    def url(self) -> str:
        return f"{self.scheme.value}://{self.authority}"
