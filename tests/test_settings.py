"""Settings loading from YAML."""

from pathlib import Path

from file_transcoder.formats import FileFormat
from file_transcoder.settings import Settings, config_path, get_settings


def test_defaults():
    s = Settings()
    assert s.transcode.separator == "#"
    assert s.transcode.default_delimiter(FileFormat.CSV) == ","
    assert s.transcode.default_delimiter(FileFormat.TXT) == ";"
    assert s.transcode.xml_root == "root"
    assert s.transcode.token_algorithm == "HS256"
    assert s.logging.format == "json"


def test_load_merges_base_and_override(tmp_path):
    (tmp_path / "base.yaml").write_text(
        "logging:\n  level: INFO\ntranscode:\n  txt_delimiter: '|'\n  xml_item: row\n"
    )
    (tmp_path / "dev.yaml").write_text("logging:\n  level: DEBUG\n  format: human\n")
    s = Settings.load(str(tmp_path / "dev.yaml"))
    assert s.logging.level == "DEBUG"
    assert s.logging.format == "human"
    assert s.transcode.txt_delimiter == "|"
    assert s.transcode.xml_item == "row"
    # untouched keys keep model defaults
    assert s.transcode.csv_delimiter == ","


def test_load_without_files_uses_defaults(tmp_path):
    s = Settings.load(str(tmp_path / "prod.yaml"))
    assert s == Settings()


def test_config_path_env_overrides(monkeypatch, tmp_path):
    monkeypatch.setenv("FILE_TRANSCODER_CONFIG_DIR", str(tmp_path))
    monkeypatch.setenv("FILE_TRANSCODER_ENV", "prod")
    assert config_path() == tmp_path / "prod.yaml"
    assert config_path("dev") == tmp_path / "dev.yaml"


def test_repo_configs_load():
    root = Path(__file__).resolve().parents[1] / "configs"
    for env in ["dev", "prod"]:
        s = Settings.load(str(root / f"{env}.yaml"))
        assert s.transcode.csv_delimiter == ","
        assert s.transcode.encoding == "utf-8-sig"
    assert Settings.load(str(root / "dev.yaml")).logging.format == "human"


def test_get_settings_is_cached(monkeypatch, tmp_path):
    monkeypatch.setenv("FILE_TRANSCODER_CONFIG_DIR", str(tmp_path))
    get_settings.cache_clear()
    try:
        assert get_settings("dev") is get_settings("dev")
    finally:
        get_settings.cache_clear()
