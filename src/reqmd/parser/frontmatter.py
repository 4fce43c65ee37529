"""YAML front-matter extraction.

A document may open with a `---` line, a YAML mapping and a closing `---`
line. Recognized keys::

    title: Widget API
    description: |
      Free text, may span lines.
    http:
      server: https://example.com:8080
      headers:
        - key: Accept
          value: application/json
      query:
        - key: api-version
          value: "2"

Unknown keys are ignored. A missing block yields the defaults.
"""

import logging

import yaml

from reqmd.errors import FrontMatterParseError
from reqmd.parser.address import Address, AddressError
from reqmd.parser.base import HttpDefaults, MetaData, Span
from reqmd.parser.multimap import Headers, QueryString
from reqmd.parser.source import SourceText

logger = logging.getLogger(__name__)

DELIMITER = "---"


def find_front_matter(source: SourceText) -> int | None:
    """Index of the closing delimiter line, or None if there is no front matter."""
    if not source.lines or source.line_text(0) != DELIMITER:
        return None
    for index in range(1, len(source)):
        if source.line_text(index) == DELIMITER:
            return index
    return None


def extract_front_matter(source: SourceText) -> tuple[MetaData, int]:
    """Parse the front matter of `source`.

    Returns the metadata and the number of leading lines it occupies
    (0 when the document has none).
    """
    closing = find_front_matter(source)
    if closing is None:
        return MetaData(), 0

    span = source.span(0, closing)
    raw = source.slice(1, closing)
    try:
        data = yaml.safe_load(raw)
    except yaml.YAMLError as e:
        raise FrontMatterParseError(f"invalid YAML in front matter: {e}", span) from e

    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise FrontMatterParseError("front matter must be a YAML mapping", span)

    meta = MetaData(
        title=_optional_text(data.get("title")),
        description=_optional_text(data.get("description")),
        http=_load_http(data.get("http"), span),
        position=span,
    )
    logger.debug("front matter on lines 1-%d: server=%s", closing + 1, meta.http.server.url)
    return meta, closing + 1


def parse_front_matter(text: str) -> MetaData:
    """Convenience wrapper returning only the metadata of `text`."""
    meta, _ = extract_front_matter(SourceText(text))
    return meta


def _optional_text(value) -> str | None:
    if value is None:
        return None
    return str(value).rstrip("\n")


def _load_http(data, span: Span) -> HttpDefaults:
    if data is None:
        return HttpDefaults()
    if not isinstance(data, dict):
        raise FrontMatterParseError("`http` must be a mapping", span)

    server = Address()
    if data.get("server") is not None:
        try:
            server = Address.parse(str(data["server"]))
        except AddressError as e:
            raise FrontMatterParseError(f"http.server: {e}", span) from e

    headers = Headers.of(_load_pairs(data.get("headers"), "http.headers", span))
    query = QueryString.of(_load_pairs(data.get("query"), "http.query", span))
    return HttpDefaults(server=server, headers=headers, query=query)


def _load_pairs(items, name: str, span: Span) -> list[tuple[str, str]]:
    if items is None:
        return []
    if not isinstance(items, list):
        raise FrontMatterParseError(f"{name} must be a list of {{key, value}} entries", span)

    pairs = []
    for i, item in enumerate(items):
        if not isinstance(item, dict) or "key" not in item or "value" not in item:
            raise FrontMatterParseError(f"{name}[{i}] must have `key` and `value`", span)
        value = item["value"]
        pairs.append((str(item["key"]), "" if value is None else _scalar(value)))
    return pairs


def _scalar(value) -> str:
    # YAML booleans would otherwise render as Python's True/False
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)
