"""Sends YAML bodies marked `send-as-json` as JSON.

Applies only to bodies fenced as `yaml` or `yml` whose fence line also
carries the `send-as-json` token:

    ```yaml send-as-json
    first_name: John
    ```
"""

import json

import yaml

from reqmd.errors import ProcessorError
from reqmd.processor.base import Processor
from reqmd.request import Request

YAML_LANGS = ("yaml", "yml")
SEND_AS_JSON = "send-as-json"


class YamlAsJson(Processor):
    name = "yaml-as-json"

    def apply(self, request: Request) -> Request:
        body = request.body
        if body.content is None or not _wants_json(body.lang, body.meta):
            return request

        try:
            data = yaml.safe_load(body.content)
        except yaml.YAMLError as e:
            raise ProcessorError(self.name, f"invalid YAML body: {e}") from e

        updated = request.model_copy(deep=True)
        updated.body.content = json.dumps(data, separators=(",", ":"), ensure_ascii=False, default=str)
        updated.body.lang = "json"
        return updated


def _wants_json(lang: str | None, meta: str | None) -> bool:
    if not lang or lang.lower() not in YAML_LANGS or not meta:
        return False
    return any(token.lower() == SEND_AS_JSON for token in meta.split())
