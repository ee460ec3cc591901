"""
strictenv: strict ``.env`` parsing with reference resolution.

The package exposes `setup`, which finds and loads env files into the process
environment, and `parse_env` for turning env file text into an ordered mapping
without side effects. Values can be validated against a schema and described
by a generated typing stub.
"""

from .loader import ACCEPTED_ENV_FILES, EnvFileNotFoundError, apply_env, load_env, setup
from .parser import EnvParseError, EnvParser, parse_env
from .stub import generate_stub, render_stub
from .validation import FieldValidator, SchemaValidator, ValidationError

__all__ = [
    "ACCEPTED_ENV_FILES",
    "EnvFileNotFoundError",
    "EnvParseError",
    "EnvParser",
    "FieldValidator",
    "SchemaValidator",
    "ValidationError",
    "apply_env",
    "generate_stub",
    "load_env",
    "parse_env",
    "render_stub",
    "setup",
]
