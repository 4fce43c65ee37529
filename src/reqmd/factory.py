"""Builds requests from markdown: defaults merging and processing."""

import logging

from reqmd.errors import ExtractionError
from reqmd.parser.base import HttpData, HttpDefaults
from reqmd.parser.markdown import parse_markdown
from reqmd.parser.multimap import Headers, QueryString
from reqmd.processor.pipeline import Pipeline
from reqmd.request import Document, MdRequest, Request

logger = logging.getLogger(__name__)


def build_request(defaults: HttpDefaults, data: HttpData) -> Request:
    """Merge front-matter defaults with one extracted block.

    The server always comes from the defaults. Default headers and query
    pairs come first, followed by the block's own; duplicates are kept.
    """
    return Request(
        title=data.title,
        description=data.description,
        address=defaults.server.model_copy(),
        method=data.method,
        path=data.path,
        query=QueryString.of(defaults.query.pairs() + data.query.pairs()),
        headers=Headers.of(defaults.headers.pairs() + data.headers.pairs()),
        body=data.body.model_copy(deep=True),
        position=data.position,
    )


class Factory:
    """Turns markdown text into a `Document` of processed requests.

    With `best_effort` set, blocks that fail to parse are dropped (and
    logged); otherwise any such block makes `build` raise `ExtractionError`
    listing every failure.
    """

    def __init__(self, pipeline: Pipeline | None = None, best_effort: bool = False):
        self.pipeline = pipeline if pipeline is not None else Pipeline()
        self.best_effort = best_effort

    def build(self, markdown: str) -> Document:
        ast = parse_markdown(markdown)
        if ast.errors:
            if not self.best_effort:
                raise ExtractionError(ast.errors)
            logger.warning("dropped %d malformed request block(s)", len(ast.errors))

        requests = []
        for data in ast.requests:
            request, error = self.pipeline.process(build_request(ast.meta.http, data))
            requests.append(MdRequest(request=request, data=data, error=error))

        logger.debug("built %d request(s) with %d processor(s)", len(requests), len(self.pipeline))
        return Document(meta=ast.meta, requests=requests)
