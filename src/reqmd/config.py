"""Settings and `.env` loading."""

import os
from collections.abc import Iterable
from pathlib import Path

from dotenv import load_dotenv
from pydantic import BaseModel

from reqmd.processor.env_overrides import DEFAULT_PREFIX

DEFAULT_ENV_FILES: tuple[Path, ...] = (Path(".env"),)


class Settings(BaseModel):
    """Options shared by the CLI commands."""

    env_prefix: str = DEFAULT_PREFIX
    timeout: float | None = None  # seconds
    best_effort: bool = False


def load_environment(extra_files: Iterable[Path] = ()) -> dict[str, str]:
    """Load `.env` files into the process environment and return a snapshot.

    Variables already set in the environment win over file values. The
    snapshot is what processors receive; they never read the files
    themselves.
    """
    for path in [*DEFAULT_ENV_FILES, *extra_files]:
        if path.is_file():
            load_dotenv(path, override=False)
    return dict(os.environ)
