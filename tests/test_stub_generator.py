import os

import pytest
import yaml

from strictenv.stub import generate_stub, render_stub


def test_render_stub_uses_class_syntax_for_identifiers():
    stub = render_stub({"HOST": "localhost", "PORT": "8080", "TOKEN": None})
    assert "from typing import Literal, TypedDict" in stub
    assert "class ProcessEnv(TypedDict):" in stub
    assert "    HOST: Literal['localhost']" in stub
    assert "    PORT: Literal['8080']" in stub
    assert "    TOKEN: None" in stub


def test_render_stub_falls_back_to_functional_syntax():
    stub = render_stub({"my-key": "a", "class": "b"})
    assert 'ProcessEnv = TypedDict(\n    "ProcessEnv",' in stub
    assert "'my-key': Literal['a']," in stub
    assert "'class': Literal['b']," in stub


def test_render_stub_escapes_values():
    stub = render_stub({"MSG": "it's"})
    assert "MSG: Literal[\"it's\"]" in stub


def test_render_stub_for_empty_mapping_is_valid():
    stub = render_stub({})
    assert stub.rstrip().endswith("pass")


def test_generate_stub_writes_stub_and_metadata(tmp_path):
    env_file = tmp_path / ".env"
    env_file.write_text("A=1\nB=${A}\n", encoding="utf-8")
    out = tmp_path / "strict_env.pyi"
    meta = tmp_path / ".strictenv.yaml"

    assert generate_stub(env_file, output=out, metadata=meta) is True

    assert "B: Literal['1']" in out.read_text(encoding="utf-8")
    recorded = yaml.safe_load(meta.read_text(encoding="utf-8"))
    assert "mod" in recorded


def test_generate_stub_skips_when_timestamp_matches(tmp_path):
    env_file = tmp_path / ".env"
    env_file.write_text("A=1\n", encoding="utf-8")
    out = tmp_path / "strict_env.pyi"
    meta = tmp_path / ".strictenv.yaml"

    assert generate_stub(env_file, output=out, metadata=meta) is True
    out.write_text("# sentinel\n", encoding="utf-8")
    assert generate_stub(env_file, output=out, metadata=meta) is False
    assert out.read_text(encoding="utf-8") == "# sentinel\n"


def test_generate_stub_regenerates_after_source_change(tmp_path):
    env_file = tmp_path / ".env"
    env_file.write_text("A=1\n", encoding="utf-8")
    out = tmp_path / "strict_env.pyi"
    meta = tmp_path / ".strictenv.yaml"
    generate_stub(env_file, output=out, metadata=meta)

    env_file.write_text("A=2\n", encoding="utf-8")
    stat = env_file.stat()
    os.utime(env_file, (stat.st_atime, stat.st_mtime + 10))

    assert generate_stub(env_file, output=out, metadata=meta) is True
    assert "A: Literal['2']" in out.read_text(encoding="utf-8")


def test_generate_stub_keeps_other_metadata(tmp_path):
    env_file = tmp_path / ".env"
    env_file.write_text("A=1\n", encoding="utf-8")
    meta = tmp_path / ".strictenv.yaml"
    meta.write_text("owner: team\n", encoding="utf-8")

    generate_stub(env_file, output=tmp_path / "env.pyi", metadata=meta)

    recorded = yaml.safe_load(meta.read_text(encoding="utf-8"))
    assert recorded["owner"] == "team"
    assert "mod" in recorded


def test_generate_stub_force(tmp_path):
    env_file = tmp_path / ".env"
    env_file.write_text("A=1\n", encoding="utf-8")
    out = tmp_path / "strict_env.pyi"
    meta = tmp_path / ".strictenv.yaml"
    generate_stub(env_file, output=out, metadata=meta)
    assert generate_stub(env_file, output=out, metadata=meta, force=True) is True


def test_generate_stub_rejects_malformed_metadata(tmp_path):
    env_file = tmp_path / ".env"
    env_file.write_text("A=1\n", encoding="utf-8")
    meta = tmp_path / ".strictenv.yaml"
    meta.write_text("mod: [unclosed\n", encoding="utf-8")

    with pytest.raises(ValueError, match="Invalid YAML in"):
        generate_stub(env_file, output=tmp_path / "env.pyi", metadata=meta)
