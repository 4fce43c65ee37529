"""Addressing one request in a document: `<file>[:<selector>]`.

Selectors:

- `3`       the third request (1-based)
- `first`   same as `1`
- `last`    the final request
- `line42`  the request whose span covers source line 42

A missing selector means `first`.
"""

import re
from enum import Enum
from pathlib import Path

from pydantic import BaseModel, Field

from reqmd.errors import (
    LineNotFoundError,
    MalformedSelectorError,
    SelectionOutOfRangeError,
)
from reqmd.request import Document, MdRequest

NUMBER_RE = re.compile(r"[0-9]+")


class SelectionKind(str, Enum):
    NTH = "nth"
    FIRST = "first"
    LAST = "last"
    LINE = "line"


class Selection(BaseModel):
    kind: SelectionKind = SelectionKind.FIRST
    value: int | None = None  # ordinal for NTH, source line for LINE

    @classmethod
    def parse(cls, token: str) -> "Selection":
        text = token.strip()
        if text == "first":
            return cls(kind=SelectionKind.FIRST)
        if text == "last":
            return cls(kind=SelectionKind.LAST)
        if text.startswith("line"):
            number = text[len("line"):]
            if not NUMBER_RE.fullmatch(number) or int(number) == 0:
                raise MalformedSelectorError(f"invalid line selector {token!r}: expected line<n> with n >= 1")
            return cls(kind=SelectionKind.LINE, value=int(number))
        if NUMBER_RE.fullmatch(text):
            return cls(kind=SelectionKind.NTH, value=int(text))
        raise MalformedSelectorError(
            f"invalid selector {token!r}: expected a number, `first`, `last` or `line<n>`"
        )

    def resolve(self, document: Document) -> MdRequest:
        count = len(document.requests)
        if self.kind == SelectionKind.LINE:
            found = document.at_line(self.value)
            if found is None:
                raise LineNotFoundError(f"no request at line {self.value}; {_coverage(document)}")
            return found

        if self.kind == SelectionKind.FIRST:
            index = 1
        elif self.kind == SelectionKind.LAST:
            index = count
        else:
            index = self.value

        if count == 0:
            raise SelectionOutOfRangeError(f"cannot select {self}: document has no requests")
        if not 1 <= index <= count:
            raise SelectionOutOfRangeError(f"request {index} is out of range; valid range is 1-{count}")
        return document.requests[index - 1]

    def __str__(self) -> str:
        if self.kind == SelectionKind.NTH:
            return str(self.value)
        if self.kind == SelectionKind.LINE:
            return f"line{self.value}"
        return self.kind.value


class Target(BaseModel):
    """A file plus the selection inside it."""

    path: Path
    selection: Selection = Field(default_factory=Selection)

    @classmethod
    def parse(cls, text: str) -> "Target":
        path, sep, token = text.rpartition(":")
        if not sep or "/" in token or "\\" in token:
            return cls(path=Path(text))
        if not path:
            raise MalformedSelectorError(f"missing file name in {text!r}")
        return cls(path=Path(path), selection=Selection.parse(token))


def select(document: Document, token: str = "first") -> MdRequest:
    """Resolve a selector token against `document`."""
    return Selection.parse(token).resolve(document)


def _coverage(document: Document) -> str:
    if not document.requests:
        return "document has no requests"
    ranges = ", ".join(
        f"{md.position.start.line}-{md.position.end.line}" for md in document.requests
    )
    return f"requests cover lines {ranges}"
