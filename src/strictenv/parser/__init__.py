from .env_parser import EnvMap, EnvParseError, EnvParser, PendingReference, parse_env

__all__ = ["EnvMap", "EnvParseError", "EnvParser", "PendingReference", "parse_env"]
