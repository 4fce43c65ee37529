"""Listing and JSON export of a document's requests."""

import json

from reqmd.request import Document, MdRequest


def list_lines(document: Document) -> list[str]:
    """Numbered titles, falling back to the request line for untitled requests."""
    width = len(str(len(document.requests)))
    lines = []
    for i, md in enumerate(document.requests, start=1):
        label = md.title or md.request.request_line()
        lines.append(f"{i:>{width}}. {label}")
    return lines


def dump(document: Document) -> list[dict]:
    return [_dump_request(md) for md in document.requests]


def dump_json(document: Document, indent: int = 2) -> str:
    return json.dumps(dump(document), indent=indent, ensure_ascii=False)


def _dump_request(md: MdRequest) -> dict:
    request = md.request
    entry = {
        "title": md.title,
        "description": md.description,
        "request": {
            "address": request.address.model_dump(mode="json"),
            "method": request.method.value,
            "path": request.path,
            "query": request.query.model_dump(mode="json"),
            "headers": request.headers.model_dump(mode="json"),
            "body": request.body.content,
        },
        "data": md.data.model_dump(mode="json"),
    }
    if md.error is not None:
        entry["error"] = str(md.error)
    return entry
