from __future__ import annotations

import os
from collections.abc import Callable, Generator

import pytest

from app.config import PaddingSettings, RenderSettings
from domain.models import GeoJsonObject
from domain.services.convert_geojson_to_svg import GeoJsonDrawing


def _clear_geosvg_env() -> None:
    for key in list(os.environ):
        if key.startswith("GEOSVG_"):
            os.environ.pop(key, None)


_clear_geosvg_env()


@pytest.fixture(autouse=True)
def clear_geosvg_env() -> Generator[None, None, None]:
    _clear_geosvg_env()
    yield
    _clear_geosvg_env()


@pytest.fixture
def render_settings() -> RenderSettings:
    return RenderSettings(
        width=400,
        height=400,
        padding=PaddingSettings(),
        attributes={},
        use_properties=None,
        projection="identity",
    )


@pytest.fixture
def render_settings_factory(render_settings: RenderSettings) -> Callable[..., RenderSettings]:
    def _factory(**overrides: object) -> RenderSettings:
        return render_settings.model_copy(update=overrides)

    return _factory


@pytest.fixture
def drawing_factory() -> Callable[..., GeoJsonDrawing]:
    def _factory(*items: GeoJsonObject) -> GeoJsonDrawing:
        drawing = GeoJsonDrawing()
        for item in items:
            drawing.append(item)
        return drawing

    return _factory
