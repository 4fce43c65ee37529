"""Markdown walker: finds `http` blocks and pairs them with context.

The document is parsed with markdown-it and its top-level blocks are
scanned once, top to bottom:

- a heading becomes the candidate title and clears the description buffer
- any other block (that is not an `http` fence) is added to the buffer
- an `http` fence starts a request, taking the candidate title and the
  buffered description, then clearing both
- a fence with any other tag directly after an `http` fence, separated only
  by whitespace, is consumed as that request's body
"""

import logging

from markdown_it import MarkdownIt
from markdown_it.tree import SyntaxTreeNode

from reqmd.errors import GrammarError
from reqmd.parser.base import AstDocument, BodyData, HttpData, Span
from reqmd.parser.frontmatter import extract_front_matter
from reqmd.parser.grammar import parse_http_block
from reqmd.parser.source import SourceText

logger = logging.getLogger(__name__)

HTTP_LANG = "http"


def parse_markdown(text: str) -> AstDocument:
    """Extract front matter and every request block from `text`.

    Blocks that fail to parse are reported in `errors` with their span
    attached; the remaining blocks are still extracted.
    """
    source = SourceText(text)
    meta, skip = extract_front_matter(source)
    requests, errors = _walk(source, skip)
    logger.debug("extracted %d request(s), %d error(s)", len(requests), len(errors))
    return AstDocument(meta=meta, requests=requests, errors=errors)


def _walk(source: SourceText, skip: int) -> tuple[list[HttpData], list[GrammarError]]:
    # Front-matter lines are blanked so markdown-it keeps the original line numbers.
    markdown = "\n" * skip + source.slice(skip, len(source))
    nodes = SyntaxTreeNode(MarkdownIt("commonmark").parse(markdown)).children

    requests: list[HttpData] = []
    errors: list[GrammarError] = []
    heading = None
    description: list[str] = []

    i = 0
    while i < len(nodes):
        node = nodes[i]
        if node.map is None:
            i += 1
            continue

        if node.type == "heading":
            heading = node
            description = []
        elif _is_http_fence(node):
            span = _node_span(source, node)
            body = BodyData()
            following = nodes[i + 1] if i + 1 < len(nodes) else None
            if _is_body_fence(source, node, following):
                body = _body_data(source, following)
                span = span.extend(body.position)
                i += 1

            title = None
            if heading is not None:
                title = _heading_text(heading) or None
                span = _node_span(source, heading).extend(span)
            text = "\n\n".join(description).strip() or None
            heading = None
            description = []

            try:
                block = parse_http_block(_fence_content(node), first_line=node.map[0] + 2)
            except GrammarError as e:
                e.span = span
                logger.warning("skipping request block at line %d: %s", span.start.line, e)
                errors.append(e)
            else:
                requests.append(
                    HttpData(
                        title=title,
                        description=text,
                        method=block.method,
                        path=block.path,
                        query=block.query,
                        headers=block.headers,
                        body=body,
                        position=span,
                    )
                )
        else:
            chunk = _block_text(source, node).strip()
            if chunk:
                description.append(chunk)
        i += 1

    return requests, errors


def _is_http_fence(node: SyntaxTreeNode) -> bool:
    return node.type == "fence" and _split_info(node.info)[0] == HTTP_LANG


def _is_body_fence(source: SourceText, node: SyntaxTreeNode, following: SyntaxTreeNode | None) -> bool:
    if following is None or following.type != "fence" or _is_http_fence(following):
        return False
    # link reference definitions produce no node, so check the gap itself
    return not source.slice(node.map[1], following.map[0]).strip()


def _split_info(info: str) -> tuple[str | None, str | None]:
    parts = info.strip().split(maxsplit=1)
    if not parts:
        return None, None
    meta = parts[1].strip() if len(parts) > 1 else None
    return parts[0], meta or None


def _node_span(source: SourceText, node: SyntaxTreeNode) -> Span:
    first, end = node.map
    last = min(end, len(source)) - 1
    return source.span(first, max(first, last))


def _block_text(source: SourceText, node: SyntaxTreeNode) -> str:
    return "\n".join(source.line_text(i) for i in range(node.map[0], min(node.map[1], len(source))))


def _heading_text(node: SyntaxTreeNode) -> str:
    return "".join(child.content for child in node.children).strip()


def _fence_content(node: SyntaxTreeNode) -> str:
    content = node.content
    return content[:-1] if content.endswith("\n") else content


def _body_data(source: SourceText, node: SyntaxTreeNode) -> BodyData:
    lang, meta = _split_info(node.info)
    return BodyData(
        content=_fence_content(node),
        lang=lang,
        meta=meta,
        position=_node_span(source, node),
    )
