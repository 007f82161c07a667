# src/file_transcoder/settings.py
from functools import lru_cache
import os
from pathlib import Path

import yaml
from pydantic import BaseModel
from pydantic_settings import BaseSettings, SettingsConfigDict

from file_transcoder.constants import (
    DEFAULT_CSV_DELIMITER,
    DEFAULT_TXT_DELIMITER,
    PATH_SEPARATOR,
    READ_ENCODING,
    TEXT_ENCODING,
    TOKEN_ALGORITHM,
    XML_ITEM_ELEMENT,
    XML_ROOT_ELEMENT,
)
from file_transcoder.formats import FileFormat

CONFIG_DIR_ENV = "FILE_TRANSCODER_CONFIG_DIR"
ENV_NAME_ENV = "FILE_TRANSCODER_ENV"


class LoggingConfig(BaseModel):
    level: str = "INFO"
    format: str = "json"  # "json" or "human"
    structured: bool = True


class TranscodeConfig(BaseModel):
    separator: str = PATH_SEPARATOR
    csv_delimiter: str = DEFAULT_CSV_DELIMITER
    txt_delimiter: str = DEFAULT_TXT_DELIMITER
    xml_root: str = XML_ROOT_ELEMENT
    xml_item: str = XML_ITEM_ELEMENT
    token_algorithm: str = TOKEN_ALGORITHM
    encoding: str = READ_ENCODING

    def default_delimiter(self, fmt: FileFormat) -> str:
        """Return the configured delimiter for a tabular format."""
        if fmt == FileFormat.TXT:
            return self.txt_delimiter
        return self.csv_delimiter


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env", env_prefix="FILE_TRANSCODER_", extra="ignore"
    )
    logging: LoggingConfig = LoggingConfig()
    transcode: TranscodeConfig = TranscodeConfig()

    @staticmethod
    def _deep_update(d: dict, u: dict) -> dict:
        # Recursively update dict d with values from u
        for k, v in u.items():
            if isinstance(v, dict) and isinstance(d.get(k), dict):
                d[k] = Settings._deep_update(d[k], v)
            else:
                d[k] = v
        return d

    @staticmethod
    def load(path: str) -> "Settings":
        """Load ``path`` on top of the ``base.yaml`` sitting next to it.

        A missing base or override file contributes nothing, so the model
        defaults always apply.
        """
        base_path = os.path.join(os.path.dirname(path), "base.yaml")
        base = _read_yaml(base_path)
        override = _read_yaml(path) if os.path.abspath(path) != os.path.abspath(base_path) else {}
        merged = Settings._deep_update(base, override)
        return Settings(**merged)


def _read_yaml(path: str) -> dict:
    if not os.path.exists(path):
        return {}
    with open(path, "r", encoding=TEXT_ENCODING) as f:
        return yaml.safe_load(f) or {}


def config_path(env: str | None = None) -> Path:
    """Return the YAML file for ``env`` (default: $FILE_TRANSCODER_ENV or dev)."""
    env = env or os.environ.get(ENV_NAME_ENV, "dev")
    config_dir = Path(os.environ.get(CONFIG_DIR_ENV, "configs"))
    return config_dir / f"{env}.yaml"


@lru_cache(maxsize=8)
def get_settings(env: str | None = None) -> Settings:
    """Cached settings for the given env (or the default env)."""
    return Settings.load(str(config_path(env)))
