from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import Dict, List, Optional

import pandas as pd

from .config import load_schema
from .loader import EnvFileNotFoundError, setup
from .logging_config import configure_logging
from .parser import EnvMap, EnvParseError
from .stub import DEFAULT_METADATA_NAME, DEFAULT_STUB_NAME, generate_stub
from .validation import ValidationError

logger = logging.getLogger("strictenv.cli")

MASK = "****"


def _parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(prog="strictenv", description="Strict .env parser and validator.")
    parser.add_argument("--log-level", help="Override log level (e.g., DEBUG, INFO).")
    sub = parser.add_subparsers(dest="command", required=True)

    check = sub.add_parser("check", help="Parse and validate env files, then print the resolved keys.")
    check.add_argument("--file", "-f", help="Env file to load. Defaults to the accepted env files in --dir.")
    check.add_argument("--dir", default=".", help="Directory searched for accepted env files.")
    check.add_argument("--encoding", default="utf-8", help="Encoding used to read env files.")
    check.add_argument("--schema", "-s", help="Path to YAML schema used to validate values.")
    check.add_argument(
        "--legacy",
        action="store_true",
        help="Resolve deferred references with the single-pass stack instead of the dependency graph.",
    )
    check.add_argument("--show-values", action="store_true", help="Print values instead of masking them.")

    stub = sub.add_parser("stub", help="Generate a typing stub describing an env file.")
    stub.add_argument("--file", "-f", default=".env", help="Env file to describe.")
    stub.add_argument("--output", "-o", default=DEFAULT_STUB_NAME, help="Stub file to write.")
    stub.add_argument("--metadata", default=DEFAULT_METADATA_NAME, help="File recording the source timestamp.")
    stub.add_argument("--encoding", default="utf-8", help="Encoding used to read the env file.")
    stub.add_argument("--force", action="store_true", help="Regenerate even when the stub is up to date.")
    stub.add_argument(
        "--legacy",
        action="store_true",
        help="Resolve deferred references with the single-pass stack instead of the dependency graph.",
    )
    return parser.parse_args(argv)


def summarize(env_map: EnvMap, show_values: bool = False) -> pd.DataFrame:
    rows: List[Dict[str, object]] = []
    for key, value in env_map.items():
        if value is None:
            shown = "<absent>"
        else:
            shown = value if show_values else MASK
        rows.append({"Key": key, "Value": shown, "Length": 0 if value is None else len(value)})
    return pd.DataFrame(rows, columns=["Key", "Value", "Length"])


def run_check(args: argparse.Namespace) -> EnvMap:
    validators = load_schema(Path(args.schema)).to_validator() if args.schema else None
    # collect into a throwaway sink so the check never touches the real environment
    sink: Dict[str, str] = {}
    env_map = setup(
        file=args.file,
        encoding=args.encoding,
        validators=validators,
        sink=sink,
        search_dir=args.dir,
        resolution="legacy" if args.legacy else "graph",
    )
    table = summarize(env_map, show_values=args.show_values)
    if table.empty:
        print("[strictenv] no variables defined")
    else:
        print(table.to_string(index=False))
    print(f"[strictenv] {len(env_map)} key(s) OK")
    return env_map


def run_stub(args: argparse.Namespace) -> bool:
    written = generate_stub(
        args.file,
        output=args.output,
        metadata=args.metadata,
        encoding=args.encoding,
        resolution="legacy" if args.legacy else "graph",
        force=args.force,
    )
    if written:
        print(f"[strictenv] wrote {args.output}")
    else:
        print(f"[strictenv] {args.output} is up to date")
    return written


def main(argv: Optional[List[str]] = None) -> int:
    args = _parse_args(argv)
    configure_logging(args.log_level)
    try:
        if args.command == "check":
            run_check(args)
        else:
            run_stub(args)
    except (EnvParseError, ValidationError, EnvFileNotFoundError, FileNotFoundError, ValueError) as exc:
        logger.debug("Command %s failed", args.command, exc_info=True)
        print(f"[strictenv] error: {exc}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
