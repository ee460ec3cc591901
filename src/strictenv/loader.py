from __future__ import annotations

"""
Loading env files into an environment sink.

The sink is any mutable string mapping and defaults to ``os.environ``. A file's
entries are written only after it has parsed and validated in full, so a bad
file never leaves half of its keys behind.
"""

import logging
import os
from pathlib import Path
from typing import Any, MutableMapping, Optional

from .parser import EnvMap, EnvParser
from .validation import run_validators

logger = logging.getLogger(__name__)

EnvSink = MutableMapping[str, str]

# probed in this order; later files override earlier ones
ACCEPTED_ENV_FILES = (
    ".env.local",
    ".env.production",
    ".env.staging",
    ".env.test",
    ".env.development",
    ".env",
)


class EnvFileNotFoundError(FileNotFoundError):
    """Raised when none of the accepted env files exist."""


def apply_env(env_map: EnvMap, sink: Optional[EnvSink] = None) -> int:
    """Copy every concrete value of ``env_map`` into ``sink``; absent values are skipped."""
    target = os.environ if sink is None else sink
    values = {key: value for key, value in env_map.items() if value is not None}
    target.update(values)
    return len(values)


def load_env(
    path: Path | str,
    encoding: str = "utf-8",
    validators: Any = None,
    sink: Optional[EnvSink] = None,
    resolution: str = "graph",
) -> EnvMap:
    env_path = Path(path)
    logger.debug("Reading env file %s (encoding=%s)", env_path, encoding)
    text = env_path.read_text(encoding=encoding)
    env_map = EnvParser(resolution=resolution).parse(text)

    if validators is not None:
        run_validators(validators, env_map)

    applied = apply_env(env_map, sink)
    logger.info("Loaded %d variable(s) from %s", applied, env_path)
    return env_map


def setup(
    file: Path | str | None = None,
    encoding: str = "utf-8",
    validators: Any = None,
    sink: Optional[EnvSink] = None,
    search_dir: Path | str = ".",
    resolution: str = "graph",
) -> EnvMap:
    """
    Load ``file`` when given, otherwise every accepted env file found in ``search_dir``.

    Files are applied one after another, so a key defined in several of them
    ends up with the value from the last file in :data:`ACCEPTED_ENV_FILES`.
    """
    if file:
        return load_env(file, encoding=encoding, validators=validators, sink=sink, resolution=resolution)

    base = Path(search_dir)
    merged: EnvMap = {}
    found = 0
    for name in ACCEPTED_ENV_FILES:
        candidate = base / name
        if not candidate.is_file():
            logger.debug("Env file %s not present, skipping", candidate)
            continue
        found += 1
        merged.update(
            load_env(candidate, encoding=encoding, validators=validators, sink=sink, resolution=resolution)
        )

    if not found:
        raise EnvFileNotFoundError("No Env file found, please add one or remove this import.")
    return merged
