"""Ordered processor chains."""

import logging
from collections.abc import Iterable, Mapping

from reqmd.errors import ProcessorError
from reqmd.processor.base import Processor
from reqmd.processor.env_overrides import DEFAULT_PREFIX, EnvOverrides
from reqmd.processor.env_substitution import EnvSubstitution
from reqmd.processor.host_header import HostHeader
from reqmd.processor.yaml_as_json import YamlAsJson
from reqmd.request import Request

logger = logging.getLogger(__name__)


class Pipeline:
    """Applies processors in registration order, each seeing the previous output."""

    def __init__(self, processors: Iterable[Processor] = ()):
        self.processors = list(processors)

    def process(self, request: Request) -> tuple[Request, ProcessorError | None]:
        """Run every processor on `request`.

        Stops at the first failure and returns the last good request along
        with the error.
        """
        for processor in self.processors:
            try:
                request = processor.apply(request)
            except ProcessorError as e:
                logger.warning("%s failed for %s: %s", processor.name, request.request_line(), e)
                return request, e
            logger.debug("%s applied to %s", processor.name, request.request_line())
        return request, None

    def __len__(self) -> int:
        return len(self.processors)


def default_pipeline(environ: Mapping[str, str], prefix: str = DEFAULT_PREFIX) -> Pipeline:
    """Overrides, then `$VAR` substitution, then YAML bodies, then the Host header."""
    return Pipeline([
        EnvOverrides(environ, prefix=prefix),
        EnvSubstitution(environ),
        YamlAsJson(),
        HostHeader(),
    ])
