"""Span-annotated data extracted from a markdown document.

The walker and the front-matter extractor produce these models; the
factory turns them into sendable requests.
"""

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field

from reqmd.errors import GrammarError
from reqmd.parser.address import Address
from reqmd.parser.multimap import Headers, QueryString


class Point(BaseModel):
    """A location in the source text."""

    line: int  # 1-based
    column: int  # 1-based
    offset: int  # 0-based, in bytes


class Span(BaseModel):
    """A start/end range in the source text."""

    start: Point
    end: Point

    def extend(self, other: "Span") -> "Span":
        """Smallest span covering both this span and `other`."""
        start = self.start if self.start.offset <= other.start.offset else other.start
        end = self.end if self.end.offset >= other.end.offset else other.end
        return Span(start=start, end=end)

    def contains_line(self, line: int) -> bool:
        return self.start.line <= line <= self.end.line


class Method(str, Enum):
    GET = "GET"
    POST = "POST"
    PUT = "PUT"
    DELETE = "DELETE"
    PATCH = "PATCH"
    HEAD = "HEAD"
    CONNECT = "CONNECT"
    OPTIONS = "OPTIONS"
    TRACE = "TRACE"

    @classmethod
    def parse(cls, token: str) -> "Method | None":
        """Case-insensitive lookup; None for unknown verbs."""
        try:
            return cls(token.upper())
        except ValueError:
            return None


class BodyData(BaseModel):
    """The fenced block paired with an `http` block, if any."""

    content: str | None = None
    lang: str | None = None  # fence language tag, e.g. json / yaml
    meta: str | None = None  # rest of the fence line, e.g. send-as-json
    position: Span | None = None


class HttpData(BaseModel):
    """One `http` block together with its heading, description and body."""

    title: str | None = None
    description: str | None = None
    method: Method = Method.GET
    path: str = "/"
    query: QueryString = Field(default_factory=QueryString)
    headers: Headers = Field(default_factory=Headers)
    body: BodyData = Field(default_factory=BodyData)
    position: Span


class HttpDefaults(BaseModel):
    """Request defaults declared under the `http` front-matter key."""

    server: Address = Field(default_factory=Address)
    headers: Headers = Field(default_factory=Headers)
    query: QueryString = Field(default_factory=QueryString)


class MetaData(BaseModel):
    """Document-level metadata read from the front matter."""

    title: str | None = None
    description: str | None = None
    http: HttpDefaults = Field(default_factory=HttpDefaults)
    position: Span | None = None


class AstDocument(BaseModel):
    """Everything extracted from one markdown document, in source order."""

    model_config = ConfigDict(arbitrary_types_allowed=True)

    meta: MetaData = Field(default_factory=MetaData)
    requests: list[HttpData] = Field(default_factory=list)
    errors: list[GrammarError] = Field(default_factory=list)
