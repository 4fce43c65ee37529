"""`$NAME` substitution from the environment.

Tokens naming an unset variable are left exactly as written, so a literal
`$FIRST_NAME` survives when nothing provides it.
"""

import re
from collections.abc import Mapping

from reqmd.processor.base import Processor
from reqmd.request import Request

TOKEN_RE = re.compile(r"\$([A-Za-z_][A-Za-z0-9_]*)")


def expand(text: str, environ: Mapping[str, str]) -> str:
    return TOKEN_RE.sub(lambda m: environ.get(m.group(1), m.group(0)), text)


class EnvSubstitution(Processor):
    """Expands variables in the path, query pairs, header pairs and body text."""

    name = "env-substitution"

    def __init__(self, environ: Mapping[str, str]):
        self.environ = dict(environ)

    def apply(self, request: Request) -> Request:
        updated = request.model_copy(deep=True)
        updated.path = expand(updated.path, self.environ)
        for pair in [*updated.query, *updated.headers]:
            pair.key = expand(pair.key, self.environ)
            pair.value = expand(pair.value, self.environ)
        if updated.body.content is not None:
            updated.body.content = expand(updated.body.content, self.environ)
        return updated
