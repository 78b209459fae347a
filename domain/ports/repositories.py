from __future__ import annotations

from collections.abc import Sequence
from pathlib import Path
from typing import Protocol

from domain.models import GeoJsonObject


class GeoJsonRepository(Protocol):
    def load_all(self, directory: Path) -> Sequence[GeoJsonObject]: ...

    def load_all_with_paths(self, directory: Path) -> Sequence[tuple[Path, GeoJsonObject]]: ...

    def load_by_path(self, path: Path) -> GeoJsonObject: ...


class SvgRepository(Protocol):
    def save(self, content: str, path: Path) -> None: ...
