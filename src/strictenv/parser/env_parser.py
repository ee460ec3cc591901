from __future__ import annotations

"""
Parser for the ``.env`` dialect.

The scan is a single forward pass over the lines followed by a deferred pass
that settles ``${KEY}`` references whose target was not usable when the line
was read. Two deferred strategies exist:

``graph``
    Outstanding references form a dependency graph that is walked depth first,
    so chains such as ``A=${B}``, ``B=${C}``, ``C=value`` resolve in any order.
``legacy``
    The outstanding references are drained as a stack, most recent first, with
    a single substitution per reference.
"""

import re
from dataclasses import dataclass
from typing import Dict, List, Optional

EnvMap = Dict[str, Optional[str]]

REF_PATTERN = re.compile(r"\$\{(.+?)\}")
OPTIONAL_MARKER = "$optional"
RESOLUTION_MODES = ("graph", "legacy")


class EnvParseError(ValueError):
    """Raised when an env file cannot be parsed."""

    def __init__(self, message: str, line: Optional[int] = None):
        super().__init__(message)
        self.message = message
        self.line = line


@dataclass(frozen=True)
class PendingReference:
    owner_key: str
    referenced_key: str
    placeholder: str
    message: str
    line: int


def _circular(line: int) -> EnvParseError:
    return EnvParseError(f"Circular reference is not allowed on line '{line}'.", line=line)


class EnvParser:
    def __init__(self, resolution: str = "graph"):
        if resolution not in RESOLUTION_MODES:
            raise ValueError(f"resolution must be one of {RESOLUTION_MODES}, got {resolution!r}")
        self.resolution = resolution

    def parse(self, text: str) -> EnvMap:
        env_map: EnvMap = {}
        # owner key -> references still waiting on a target
        pending: Dict[str, List[PendingReference]] = {}
        stack: List[PendingReference] = []
        overwritten: List[PendingReference] = []

        for idx, raw in enumerate(text.split("\n")):
            line_no = idx + 1
            if raw.startswith("#") or not raw.strip():
                continue
            if "=" not in raw:
                raise EnvParseError("Line expected to have key-value pair separated by '='")

            key, value = raw.split("=", 1)
            is_optional = False
            if "#" in value:
                value, comment = value.split("#", 1)
                is_optional = OPTIONAL_MARKER in comment

            key = key.strip()
            value = _strip_quotes(value.strip())

            refs: List[PendingReference] = []
            for match in REF_PATTERN.finditer(value):
                placeholder, ref_key = match.group(0), match.group(1)
                target = env_map.get(ref_key)
                if target is not None and (self.resolution == "legacy" or not pending.get(ref_key)):
                    value = value.replace(placeholder, target)
                    continue
                refs.append(
                    PendingReference(
                        owner_key=key,
                        referenced_key=ref_key,
                        placeholder=placeholder,
                        message=f"At Line '{line_no}' invalid reference key found \"{ref_key}\".",
                        line=line_no,
                    )
                )

            if not key:
                raise EnvParseError(f"Environment variable key is missing at line: {line_no}", line=line_no)
            if not value and not is_optional:
                raise EnvParseError(
                    f"Environment variable '{key}' value is missing at line: {line_no}", line=line_no
                )

            env_map[key] = None if is_optional and not value else value
            stack.extend(refs)
            overwritten.extend(pending.get(key, []))
            pending[key] = refs

        if self.resolution == "legacy":
            _resolve_stack(env_map, stack)
        else:
            _resolve_graph(env_map, pending, overwritten)
        return env_map


def _strip_quotes(value: str) -> str:
    if "'" in value:
        return value.replace("'", "")
    if '"' in value:
        return value.replace('"', "")
    return value


def _resolve_stack(env_map: EnvMap, stack: List[PendingReference]) -> None:
    while stack:
        ref = stack.pop()
        target = env_map.get(ref.referenced_key)
        if not target:
            raise EnvParseError(ref.message, line=ref.line)
        if target == ref.placeholder:
            raise _circular(ref.line)
        current = env_map.get(ref.owner_key)
        if current is not None:
            env_map[ref.owner_key] = current.replace(ref.placeholder, target)


def _resolve_graph(
    env_map: EnvMap,
    pending: Dict[str, List[PendingReference]],
    overwritten: List[PendingReference],
) -> None:
    done = set()
    # keys on the current walk, with the line of the reference that left each one
    path: Dict[str, int] = {}

    for root in pending:
        if root in done:
            continue
        path[root] = 0
        frames = [[root, 0]]
        while frames:
            frame = frames[-1]
            key, idx = frame
            refs = pending.get(key, [])
            if idx == len(refs):
                frames.pop()
                del path[key]
                done.add(key)
                continue

            ref = refs[idx]
            target_key = ref.referenced_key
            if env_map.get(target_key) is None:
                raise EnvParseError(ref.message, line=ref.line)
            if target_key not in done:
                path[key] = ref.line
                if target_key in path:
                    raise _circular(path[target_key])
                path[target_key] = 0
                frames.append([target_key, 0])
                continue

            current = env_map[key]
            if current is not None:
                env_map[key] = current.replace(ref.placeholder, env_map[target_key] or "")
            frame[1] += 1

    # references from assignments that a later line replaced still need a target
    for ref in overwritten:
        if env_map.get(ref.referenced_key) is None:
            raise EnvParseError(ref.message, line=ref.line)


def parse_env(text: str, resolution: str = "graph") -> EnvMap:
    """Parse env file text into an ordered mapping of key to value (``None`` when absent)."""
    return EnvParser(resolution=resolution).parse(text)
