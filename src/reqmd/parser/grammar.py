"""Grammar for the contents of an `http` fenced block.

    POST /widget/search?q=full+metal
        &max=10
    Content-Type: application/json
    Authorization: Bearer $TOKEN

The first non-blank line is `METHOD path`, optionally followed by an inline
query string and an `HTTP/x.y` token. Lines starting with `?` or `&` add
query pairs; the two markers are interchangeable. Other non-blank lines are
`Key: Value` headers. Keys and values are kept verbatim, nothing is
percent-decoded.
"""

import re

from pydantic import BaseModel, Field

from reqmd.errors import GrammarError
from reqmd.parser.base import Method
from reqmd.parser.multimap import Headers, QueryString

HEADER_RE = re.compile(r"^([!#$%&'*+.^_`|~0-9A-Za-z-]+):(.*)$")
VERSION_RE = re.compile(r"^HTTP/\d+(\.\d+)?$", re.IGNORECASE)


class ParsedBlock(BaseModel):
    """Method, path, query and headers read from one block."""

    method: Method
    path: str
    query: QueryString = Field(default_factory=QueryString)
    headers: Headers = Field(default_factory=Headers)


def parse_http_block(text: str, first_line: int = 1) -> ParsedBlock:
    """Parse the raw text of an `http` block.

    `first_line` is the source line number of the block's first content
    line; it is only used to report errors.
    """
    lines = text.splitlines()
    index = 0
    while index < len(lines) and not lines[index].strip():
        index += 1
    if index == len(lines):
        raise GrammarError("empty request block", line=first_line)

    request_line = lines[index].strip()
    method, path, query = _parse_request_line(request_line, first_line + index)
    headers = Headers()

    for offset, line in enumerate(lines[index + 1:], start=index + 1):
        stripped = line.strip()
        if not stripped:
            continue
        line_no = first_line + offset
        if stripped[0] in "?&":
            _add_query_pairs(query, stripped[1:], line_no)
            continue
        match = HEADER_RE.match(stripped)
        if not match:
            raise GrammarError(f"malformed header line: {stripped!r}", line=line_no)
        headers.insert(match.group(1), match.group(2).lstrip())

    return ParsedBlock(method=method, path=path, query=query, headers=headers)


def _parse_request_line(line: str, line_no: int) -> tuple[Method, str, QueryString]:
    tokens = line.split()
    method = Method.parse(tokens[0])
    if method is None:
        raise GrammarError(f"unrecognized method {tokens[0]!r}", line=line_no)
    if len(tokens) < 2:
        raise GrammarError(f"missing path after {tokens[0]!r}", line=line_no)
    if len(tokens) > 3 or (len(tokens) == 3 and not VERSION_RE.match(tokens[2])):
        raise GrammarError(f"unexpected text after path: {' '.join(tokens[2:])!r}", line=line_no)

    target = tokens[1]
    query = QueryString()
    path, sep, inline_query = target.partition("?")
    if not path:
        raise GrammarError(f"missing path in {target!r}", line=line_no)
    if sep:
        _add_query_pairs(query, inline_query, line_no)
    return method, path, query


def _add_query_pairs(query: QueryString, text: str, line_no: int) -> None:
    for chunk in text.strip().split("&"):
        if not chunk:
            continue
        key, _, value = chunk.partition("=")
        if not key:
            raise GrammarError(f"query parameter without a name: {chunk!r}", line=line_no)
        query.insert(key, value)
