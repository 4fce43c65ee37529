"""Document-wide overrides taken from `REQMD_*` environment variables.

    REQMD_SERVER=https://staging.example.com   replaces the server address
    REQMD_HEADER_X-Api-Key=abc                 sets header X-Api-Key
    REQMD_QUERY_debug=true                     sets query parameter debug

An existing entry with the same name has its value replaced in place;
otherwise the pair is appended.
"""

from collections.abc import Mapping

from reqmd.errors import ProcessorError
from reqmd.parser.address import Address, AddressError
from reqmd.processor.base import Processor
from reqmd.request import Request

DEFAULT_PREFIX = "REQMD_"


class EnvOverrides(Processor):
    name = "env-overrides"

    def __init__(self, environ: Mapping[str, str], prefix: str = DEFAULT_PREFIX):
        self.server: str | None = None
        self.headers: list[tuple[str, str]] = []
        self.query: list[tuple[str, str]] = []

        for key, value in environ.items():
            if not key.startswith(prefix):
                continue
            suffix = key[len(prefix):]
            if suffix == "SERVER":
                self.server = value
            elif suffix.startswith("HEADER_") and len(suffix) > len("HEADER_"):
                self.headers.append((suffix[len("HEADER_"):], value))
            elif suffix.startswith("QUERY_") and len(suffix) > len("QUERY_"):
                self.query.append((suffix[len("QUERY_"):], value))

    def apply(self, request: Request) -> Request:
        if self.server is None and not self.headers and not self.query:
            return request

        updated = request.model_copy(deep=True)
        if self.server is not None:
            try:
                updated.address = Address.parse(self.server)
            except AddressError as e:
                raise ProcessorError(self.name, str(e)) from e
        for key, value in self.query:
            updated.query.set(key, value)
        for key, value in self.headers:
            updated.headers.set(key, value)
        return updated
