"""Line bookkeeping used to turn line ranges into byte-accurate spans."""

import re

from reqmd.parser.base import Point, Span

# markdown-it treats CRLF, CR and LF alike
LINE_END_RE = re.compile(r"\r\n|\r|\n")


class SourceText:
    """Markdown source split into lines with their start offsets."""

    def __init__(self, text: str):
        self.text = text
        self.lines: list[str] = []
        start = 0
        for match in LINE_END_RE.finditer(text):
            self.lines.append(text[start:match.end()])
            start = match.end()
        if start < len(text):
            self.lines.append(text[start:])

        self._byte_starts: list[int] = []
        offset = 0
        for line in self.lines:
            self._byte_starts.append(offset)
            offset += len(line.encode("utf-8"))
        self.byte_length = offset

    def __len__(self) -> int:
        return len(self.lines)

    def line_text(self, index: int) -> str:
        """Line at 0-based `index` without its line terminator."""
        return self.lines[index].rstrip("\r\n")

    def span(self, first: int, last: int) -> Span:
        """Span from the start of line `first` to the end of line `last` (0-based, inclusive)."""
        tail = self.line_text(last)
        return Span(
            start=Point(line=first + 1, column=1, offset=self._byte_starts[first]),
            end=Point(
                line=last + 1,
                column=len(tail) + 1,
                offset=self._byte_starts[last] + len(tail.encode("utf-8")),
            ),
        )

    def slice(self, first: int, end: int) -> str:
        """Text of lines `first` up to but excluding `end` (0-based)."""
        return "".join(self.lines[first:end])
