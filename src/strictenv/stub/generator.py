from __future__ import annotations

"""
Typing stub generation for a parsed env file.

The stub declares a ``ProcessEnv`` TypedDict whose fields are typed with the
exact literal value found in the env file. Regeneration is skipped while the
source file's modification time matches the one recorded in the metadata file.
"""

import keyword
import logging
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, Optional

import yaml

from ..parser import EnvMap, EnvParser

logger = logging.getLogger(__name__)

DEFAULT_STUB_NAME = "strict_env.pyi"
DEFAULT_METADATA_NAME = ".strictenv.yaml"

HEADER = "# Generated by strictenv. Do not edit by hand.\nfrom typing import Literal, TypedDict\n"


def _annotation(value: Optional[str]) -> str:
    return "None" if value is None else f"Literal[{value!r}]"


def render_stub(env_map: EnvMap) -> str:
    """Render the ``.pyi`` source describing ``env_map``."""
    use_class = all(key.isidentifier() and not keyword.iskeyword(key) for key in env_map)
    if use_class:
        body = [f"    {key}: {_annotation(value)}" for key, value in env_map.items()] or ["    pass"]
        return HEADER + "\n\nclass ProcessEnv(TypedDict):\n" + "\n".join(body) + "\n"

    entries = [f"        {key!r}: {_annotation(value)}," for key, value in env_map.items()]
    return (
        HEADER
        + "\nProcessEnv = TypedDict(\n    \"ProcessEnv\",\n    {\n"
        + "\n".join(entries)
        + "\n    },\n)\n"
    )


def source_timestamp(path: Path) -> str:
    mtime = path.stat().st_mtime
    return datetime.fromtimestamp(mtime, tz=timezone.utc).isoformat()


def read_metadata(path: Path) -> Dict[str, Any]:
    if not path.exists():
        return {}
    with path.open("r", encoding="utf-8") as fh:
        try:
            payload = yaml.safe_load(fh) or {}
        except yaml.YAMLError as exc:
            raise ValueError(f"Invalid YAML in {path}: {exc}") from exc
    if not isinstance(payload, dict):
        raise ValueError(f"Metadata root must be a mapping: {path}")
    return payload


def write_metadata(path: Path, payload: Dict[str, Any]) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    with path.open("w", encoding="utf-8") as fh:
        yaml.safe_dump(payload, fh, sort_keys=True)


def generate_stub(
    env_file: Path | str,
    output: Path | str = DEFAULT_STUB_NAME,
    metadata: Path | str = DEFAULT_METADATA_NAME,
    encoding: str = "utf-8",
    resolution: str = "graph",
    force: bool = False,
) -> bool:
    """Write the stub for ``env_file``; returns ``False`` when the cached stub is still current."""
    env_path = Path(env_file)
    out_path = Path(output)
    meta_path = Path(metadata)
    if not env_path.exists():
        raise FileNotFoundError(f"Env file not found: {env_path}")

    stamp = source_timestamp(env_path)
    if not force and out_path.exists():
        recorded = read_metadata(meta_path).get("mod")
        if recorded == stamp:
            logger.info("Stub %s is up to date with %s", out_path, env_path)
            return False

    env_map = EnvParser(resolution=resolution).parse(env_path.read_text(encoding=encoding))
    out_path.parent.mkdir(parents=True, exist_ok=True)
    out_path.write_text(render_stub(env_map), encoding="utf-8")

    payload = read_metadata(meta_path)
    payload["mod"] = stamp
    write_metadata(meta_path, payload)
    logger.info("Wrote stub %s for %d key(s)", out_path, len(env_map))
    return True
