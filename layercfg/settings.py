from __future__ import annotations
from pathlib import Path
from typing import Optional
from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    # layer sources: either a manifest or the defaults/config pair
    manifest: Optional[Path] = Field(default=None, alias="LAYERCFG_MANIFEST")
    defaults_file: Optional[Path] = Field(default=None, alias="LAYERCFG_DEFAULTS_FILE")
    config_file: Optional[Path] = Field(default=None, alias="LAYERCFG_CONFIG_FILE")

    log_level: str = Field(default="INFO", alias="LAYERCFG_LOG_LEVEL")
    log_json: bool = Field(default=False, alias="LAYERCFG_LOG_JSON")
    log_file: Optional[Path] = Field(default=None, alias="LAYERCFG_LOG_FILE")

    api_host: str = Field(default="127.0.0.1", alias="LAYERCFG_API_HOST")
    api_port: int = Field(default=8000, alias="LAYERCFG_API_PORT")

    model_config = SettingsConfigDict(extra="ignore", populate_by_name=True)
