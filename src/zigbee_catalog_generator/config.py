"""Catalog configuration: built-in alias table, upstream URLs and header text."""

from __future__ import annotations

from collections.abc import Mapping
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator


class ConfigError(RuntimeError):
    """Raised when a catalog configuration file cannot be loaded."""


class FileAlias(BaseModel):
    """Human-readable section title for one category file."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    file_id: str = Field(min_length=1)
    alias: str = Field(min_length=1)


DEFAULT_FILE_ALIASES: tuple[FileAlias, ...] = tuple(
    FileAlias(file_id=file_id, alias=alias)
    for file_id, alias in (
        ("lumi.json", "Aqara/Xiaomi"),
        ("hue.json", "Philips"),
        ("gledopto.json", "GLEDOPTO"),
        ("gs.json", "GS"),
        ("konke.json", "Konke"),
        ("lifecontrol.json", "Life Control"),
        ("orvibo.json", "ORVIBO"),
        ("perenio.json", "Perenio"),
        ("yandex.json", "Yandex"),
        ("sonoff.json", "Sonoff"),
        ("ikea.json", "IKEA"),
        ("tuya.json", "TUYA"),
        ("efekta.json", "Efekta"),
        ("modkam.json", "Modkam"),
        ("pushok.json", "PushOk"),
        ("bacchus.json", "Bacchus"),
        ("homed.json", "HOMEd"),
        ("slacky.json", "Slacky"),
        ("other.json", "..."),
    )
)

CATCH_ALL_FILE = "other.json"
DEFAULT_PERMALINK_BASE = (
    "https://github.com/u236/homed-service-zigbee/blob/master/deploy/data/usr/share/homed-zigbee"
)
DEFAULT_LISTING_URL = (
    "https://api.github.com/repos/u236/homed-service-zigbee/contents/deploy/data/usr/share/homed-zigbee"
)
DEFAULT_TITLE = "ZigBee: Поддерживаемые устройства"
DEFAULT_GENERAL_HEADING = "Общие сведения"
DEFAULT_GENERAL_PARAGRAPHS: tuple[str, ...] = (
    "Список поддерживаемых устройств невелик, но он периодически пополняется. "
    "Для добавления поддержки новых устройств можно создать запрос на "
    "[GitHub](https://github.com/u236/homed-service-zigbee/issues) или заглянуть в "
    "[чат проекта](https://t.me/homed_chat) в Telegram.",
    "Представленный ниже список поддерживаемых устройств формируется из файлов "
    "библиотеки устройств, в полу-автоматическом режиме, поэтому он может быть не "
    "совсем актуальным.",
)


class CatalogConfig(BaseModel):
    """Settings for one catalog generation run."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    file_aliases: tuple[FileAlias, ...] = DEFAULT_FILE_ALIASES
    catch_all_file: str = CATCH_ALL_FILE
    permalink_base: str = DEFAULT_PERMALINK_BASE
    listing_url: str = DEFAULT_LISTING_URL
    title: str = DEFAULT_TITLE
    general_heading: str = DEFAULT_GENERAL_HEADING
    general_paragraphs: tuple[str, ...] = DEFAULT_GENERAL_PARAGRAPHS
    pattern: str = "*.json"

    @field_validator("file_aliases", mode="before")
    @classmethod
    def _aliases_from_mapping(cls, value: Any) -> Any:
        if isinstance(value, Mapping):
            return [{"file_id": key, "alias": alias} for key, alias in value.items()]
        return value

    @field_validator("permalink_base")
    @classmethod
    def _strip_trailing_slash(cls, value: str) -> str:
        return value.rstrip("/")


def load_catalog_config(path: Path) -> CatalogConfig:
    """Load catalog settings from a YAML file.

    Keys missing from the file keep their built-in defaults.

    Args:
        path (Path): YAML configuration file.

    Returns:
        CatalogConfig: Validated configuration.
    """
    try:
        with path.open("r", encoding="utf-8") as handle:
            payload = yaml.safe_load(handle)
    except OSError as exc:
        raise ConfigError(f"Failed to read config file {path}: {exc}") from exc
    except yaml.YAMLError as exc:
        raise ConfigError(f"Failed to parse YAML in {path}: {exc}") from exc

    if payload is None:
        payload = {}
    if not isinstance(payload, dict):
        raise ConfigError(f"Config file must deserialize to a mapping, got {type(payload)!r}")

    try:
        return CatalogConfig.model_validate(payload)
    except ValidationError as exc:
        raise ConfigError(f"Invalid catalog config {path}: {exc}") from exc
