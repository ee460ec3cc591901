import os

import pytest

from strictenv import (
    ACCEPTED_ENV_FILES,
    EnvFileNotFoundError,
    EnvParseError,
    FieldValidator,
    ValidationError,
    apply_env,
    load_env,
    setup,
)


def test_load_env_applies_concrete_values_to_sink(tmp_path):
    env_file = tmp_path / ".env"
    env_file.write_text("A=1\nB= # $optional\nC=${A}2\n", encoding="utf-8")
    sink = {}

    env_map = load_env(env_file, sink=sink)

    assert env_map == {"A": "1", "B": None, "C": "12"}
    assert sink == {"A": "1", "C": "12"}


def test_load_env_defaults_to_process_environment(tmp_path, monkeypatch):
    monkeypatch.setenv("STRICTENV_TEST_KEY", "old")
    env_file = tmp_path / ".env"
    env_file.write_text("STRICTENV_TEST_KEY=hello\n", encoding="utf-8")

    load_env(env_file)

    assert os.environ["STRICTENV_TEST_KEY"] == "hello"


def test_load_env_honours_encoding(tmp_path):
    env_file = tmp_path / ".env"
    env_file.write_bytes("GREETING=héllo\n".encode("latin-1"))
    sink = {}

    load_env(env_file, encoding="latin-1", sink=sink)

    assert sink["GREETING"] == "héllo"


def test_parse_failure_leaves_sink_untouched(tmp_path):
    env_file = tmp_path / ".env"
    env_file.write_text("A=1\nB=\n", encoding="utf-8")
    sink = {"EXISTING": "x"}

    with pytest.raises(EnvParseError):
        load_env(env_file, sink=sink)

    assert sink == {"EXISTING": "x"}


def test_validation_failure_leaves_sink_untouched(tmp_path):
    env_file = tmp_path / ".env"
    env_file.write_text("PORT=abc\n", encoding="utf-8")
    sink = {}

    with pytest.raises(ValidationError, match="For key 'PORT'"):
        load_env(env_file, validators={"PORT": FieldValidator(kind="integer")}, sink=sink)

    assert sink == {}


def test_setup_with_explicit_file(tmp_path):
    env_file = tmp_path / "custom.env"
    env_file.write_text("MODE=prod\n", encoding="utf-8")
    sink = {}

    assert setup(file=env_file, sink=sink) == {"MODE": "prod"}
    assert sink == {"MODE": "prod"}


def test_setup_loads_accepted_files_in_order(tmp_path):
    (tmp_path / ".env.local").write_text("SHARED=local\nLOCAL_ONLY=1\n", encoding="utf-8")
    (tmp_path / ".env").write_text("SHARED=base\nBASE_ONLY=2\n", encoding="utf-8")
    sink = {}

    env_map = setup(search_dir=tmp_path, sink=sink)

    assert env_map == {"SHARED": "base", "LOCAL_ONLY": "1", "BASE_ONLY": "2"}
    assert sink == env_map


def test_setup_ignores_unlisted_files(tmp_path):
    (tmp_path / ".env.custom").write_text("A=1\n", encoding="utf-8")
    (tmp_path / ".env.test").write_text("B=2\n", encoding="utf-8")

    assert setup(search_dir=tmp_path, sink={}) == {"B": "2"}


def test_setup_without_any_env_file_raises(tmp_path):
    with pytest.raises(EnvFileNotFoundError, match="No Env file found"):
        setup(search_dir=tmp_path, sink={})


def test_accepted_files_end_with_plain_env():
    assert ACCEPTED_ENV_FILES[-1] == ".env"
    assert ACCEPTED_ENV_FILES[0] == ".env.local"


def test_apply_env_skips_absent_values():
    sink = {"A": "old"}
    assert apply_env({"A": "new", "B": None}, sink) == 1
    assert sink == {"A": "new"}
