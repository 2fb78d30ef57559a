from typing import Any, Dict, Literal

import yaml
from pydantic import BaseModel, Field


class PathsCfg(BaseModel):
    logs_root: str = "logs"
    inbox: str = "inbox"
    outbox: str = "outbox"
    archive: str = "archive"
    error: str = "error"


class ParsersCfg(BaseModel):
    autodetect: bool = True
    override: Literal["", "GENERIC", "EMR"] = ""
    remove_empty_fields: bool = True
    include_document_content: bool = False


class LoggingCfg(BaseModel):
    level: str = "INFO"


class Settings(BaseModel):
    app: Dict[str, Any] = Field(default_factory=dict)
    paths: PathsCfg = Field(default_factory=PathsCfg)
    parsers: ParsersCfg = Field(default_factory=ParsersCfg)
    logging: LoggingCfg = Field(default_factory=LoggingCfg)


def load_settings(path: str) -> Settings:
    with open(path, "r", encoding="utf-8") as f:
        raw = yaml.safe_load(f) or {}
    return Settings.model_validate(raw)
