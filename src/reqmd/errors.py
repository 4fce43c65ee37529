"""Error types raised while extracting, processing and selecting requests."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from reqmd.parser.base import Span


class ReqmdError(Exception):
    """Base class for every error reported by reqmd."""


class FrontMatterParseError(ReqmdError):
    """The YAML front matter is malformed or holds an invalid value."""

    def __init__(self, message: str, span: Span | None = None):
        super().__init__(message)
        self.span = span


class GrammarError(ReqmdError):
    """An `http` block could not be parsed.

    `line` is the absolute source line of the offending text when known,
    `span` the position of the whole block.
    """

    def __init__(self, message: str, line: int | None = None, span: Span | None = None):
        super().__init__(message)
        self.message = message
        self.line = line
        self.span = span

    def __str__(self) -> str:
        if self.line is not None:
            return f"line {self.line}: {self.message}"
        if self.span is not None:
            return f"line {self.span.start.line}: {self.message}"
        return self.message


class ExtractionError(ReqmdError):
    """One or more `http` blocks of a document failed to parse."""

    def __init__(self, errors: list[GrammarError]):
        self.errors = errors
        details = "; ".join(str(e) for e in errors)
        super().__init__(f"{len(errors)} request block(s) failed to parse: {details}")


class ProcessorError(ReqmdError):
    """A processor failed for a single request."""

    def __init__(self, processor: str, message: str):
        super().__init__(f"{processor}: {message}")
        self.processor = processor


class SelectorError(ReqmdError):
    """A selection token could not be resolved."""


class MalformedSelectorError(SelectorError):
    pass


class SelectionOutOfRangeError(SelectorError):
    pass


class LineNotFoundError(SelectorError):
    pass


class TransportError(ReqmdError):
    """Sending a request failed."""
