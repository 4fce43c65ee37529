"""Sendable requests and the documents that hold them."""

from pydantic import BaseModel, ConfigDict, Field

from reqmd.errors import ProcessorError
from reqmd.parser.address import Address
from reqmd.parser.base import BodyData, HttpData, Method, MetaData, Span
from reqmd.parser.multimap import Headers, QueryString


class Request(BaseModel):
    """A fully resolved request: front-matter defaults merged with its block."""

    title: str | None = None
    description: str | None = None
    address: Address = Field(default_factory=Address)
    method: Method = Method.GET
    path: str = "/"
    query: QueryString = Field(default_factory=QueryString)
    headers: Headers = Field(default_factory=Headers)
    body: BodyData = Field(default_factory=BodyData)
    position: Span

    def request_line(self) -> str:
        """`METHOD /path?k=v&...` as written, used when a request has no title."""
        return f"{self.method.value} {self.target()}"

    def target(self) -> str:
        if not self.query:
            return self.path
        return self.path + "?" + "&".join(f"{p.key}={p.value}" for p in self.query)

    @property
    def url(self) -> str:
        return self.address.url + self.target()


class MdRequest(BaseModel):
    """A request together with the block it was built from.

    `error` is set when a processor failed for this request; `request` then
    holds the last successfully processed version.
    """

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    request: Request
    data: HttpData
    error: ProcessorError | None = None

    @property
    def title(self) -> str | None:
        return self.request.title

    @property
    def description(self) -> str | None:
        return self.request.description

    @property
    def position(self) -> Span:
        return self.data.position


class Document(BaseModel):
    """Front matter plus requests in source order. Never modified once built."""

    model_config = ConfigDict(frozen=True)

    meta: MetaData = Field(default_factory=MetaData)
    requests: list[MdRequest] = Field(default_factory=list)

    def __len__(self) -> int:
        return len(self.requests)

    def at_line(self, line: int) -> MdRequest | None:
        """The request whose span covers source `line` (1-based)."""
        for md in self.requests:
            if md.position.contains_line(line):
                return md
        return None
