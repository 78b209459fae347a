from __future__ import annotations

import os
import re
from pathlib import Path
from typing import Annotated, ClassVar

from pydantic import BaseModel, Field, field_validator
from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict
from pydantic_settings.sources import PydanticBaseSettingsSource, YamlConfigSettingsSource

from domain.models import Padding, Projection
from domain.services.convert_geojson_to_svg import DrawOptions
from domain.services.projections import PROJECTIONS, resolve_projection

DEFAULT_CONFIG_PATH = Path("config/render.yaml")
CONFIG_PATH_ENV = "GEOSVG_CONFIG_PATH"

# Accepts "class, style", "[class,style]" and quoted variants.
_PROPERTY_NAME = re.compile(r"[^\s,\[\]\"']+")


def _property_names(raw_value: str) -> list[str]:
    return _PROPERTY_NAME.findall(raw_value)


class PaddingSettings(BaseModel):
    top: float = 0.0
    right: float = 0.0
    bottom: float = 0.0
    left: float = 0.0

    def to_padding(self) -> Padding:
        return Padding(top=self.top, right=self.right, bottom=self.bottom, left=self.left)


class RenderSettings(BaseModel):
    width: float = Field(default=1000.0, gt=0)
    height: float = Field(default=510.0, gt=0)
    padding: PaddingSettings = PaddingSettings()
    attributes: dict[str, str] = Field(default_factory=dict)
    use_properties: Annotated[list[str] | None, NoDecode] = None
    projection: str = "identity"
    input_dir: Path = Path("data/geojson")
    output_dir: Path = Path("data/svg")

    @field_validator("use_properties", mode="before")
    @classmethod
    def normalize_use_properties(cls, value: object) -> list[str] | None:
        if value is None:
            return None
        if isinstance(value, list):
            normalized: list[str] = []
            for item in value:
                normalized.extend(_property_names(str(item)))
            return normalized
        return _property_names(str(value))

    @field_validator("attributes", mode="before")
    @classmethod
    def normalize_attributes(cls, value: object) -> dict[str, str]:
        if value is None or value == "":
            return {}
        if isinstance(value, dict):
            return {str(key): str(item) for key, item in value.items()}
        msg = "render.attributes must be a mapping"
        raise ValueError(msg)

    @field_validator("projection", mode="after")
    @classmethod
    def validate_projection(cls, value: str) -> str:
        normalized = value.strip().lower()
        if normalized not in PROJECTIONS:
            known = ", ".join(sorted(PROJECTIONS))
            msg = f"render.projection must be one of: {known}"
            raise ValueError(msg)
        return normalized

    def get_projection(self) -> Projection:
        return resolve_projection(self.projection)

    def to_draw_options(self) -> DrawOptions:
        options = DrawOptions(padding=self.padding.to_padding()).with_attributes(self.attributes)
        if self.use_properties is not None:
            options = options.use_properties(self.use_properties)
        return options


class AppSettings(BaseSettings):
    model_config = SettingsConfigDict(env_prefix="GEOSVG_", env_nested_delimiter="__")

    render: RenderSettings = RenderSettings()

    _yaml_path: ClassVar[Path | None] = None

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        # Explicit values win over GEOSVG_* variables, which win over the YAML file.
        if cls._yaml_path is None:
            return init_settings, env_settings
        yaml_settings = YamlConfigSettingsSource(settings_cls, yaml_file=cls._yaml_path)
        return init_settings, env_settings, yaml_settings


def resolve_config_path(config_path: Path | None = None) -> Path | None:
    if config_path is None and os.getenv(CONFIG_PATH_ENV):
        config_path = Path(os.environ[CONFIG_PATH_ENV])
    if config_path is None:
        return DEFAULT_CONFIG_PATH if DEFAULT_CONFIG_PATH.is_file() else None
    if not config_path.is_file():
        msg = f"Config file not found: {config_path}"
        raise FileNotFoundError(msg)
    return config_path


def load_settings(config_path: Path | None = None) -> AppSettings:
    AppSettings._yaml_path = resolve_config_path(config_path)
    try:
        return AppSettings()
    finally:
        AppSettings._yaml_path = None
