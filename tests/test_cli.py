import base64
import json

import pytest
from typer.testing import CliRunner

from file_transcoder.cli import app

SECRET = "unit-test-secret-key-with-32-bytes!!"

runner = CliRunner()


@pytest.fixture(autouse=True)
def quiet_config(tmp_path, monkeypatch):
    config_dir = tmp_path / "configs"
    config_dir.mkdir()
    (config_dir / "base.yaml").write_text("logging:\n  level: ERROR\n  format: json\n")
    monkeypatch.setenv("FILE_TRANSCODER_CONFIG_DIR", str(config_dir))
    monkeypatch.delenv("FILE_TRANSCODER_SECRET_KEY", raising=False)


def test_health():
    result = runner.invoke(app, ["health"])
    assert result.exit_code == 0
    assert "ok" in result.stdout


def test_formats_lists_all():
    result = runner.invoke(app, ["formats"])
    assert result.exit_code == 0
    for name in ("json", "xml", "csv", "txt"):
        assert name in result.stdout


def test_convert_prints_base64_and_keeps_input(tmp_path):
    src = tmp_path / "people.csv"
    src.write_text("name,city\nAlice,Lima\n")
    result = runner.invoke(app, ["convert", str(src), "--to", "json", "--key", SECRET])
    assert result.exit_code == 0, result.stdout
    decoded = base64.b64decode(result.stdout.strip()).decode("utf-8")
    assert json.loads(decoded) == [{"name": "Alice", "city": "Lima"}]
    assert src.exists()


def test_convert_writes_output_file(tmp_path, monkeypatch):
    src = tmp_path / "people.csv"
    src.write_text("name,tarjeta\nAlice,4111111111111111\n")
    out = tmp_path / "out" / "people.xml"
    monkeypatch.setenv("FILE_TRANSCODER_SECRET_KEY", SECRET)
    result = runner.invoke(app, ["convert", str(src), "--to", "xml", "--output", str(out)])
    assert result.exit_code == 0, result.stdout
    text = out.read_text(encoding="utf-8")
    assert "<name>Alice</name>" in text
    assert "4111111111111111" not in text


def test_convert_unsupported_target_exits_2(tmp_path):
    src = tmp_path / "people.csv"
    src.write_text("a,b\n1,2\n")
    result = runner.invoke(app, ["convert", str(src), "--to", "yaml", "--key", SECRET])
    assert result.exit_code == 2


def test_convert_empty_csv_exits_1(tmp_path):
    src = tmp_path / "people.csv"
    src.write_text("a,b\n")
    result = runner.invoke(app, ["convert", str(src), "--to", "json", "--key", SECRET])
    assert result.exit_code == 1
