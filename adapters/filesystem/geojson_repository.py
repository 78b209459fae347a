from __future__ import annotations

import logging
from collections.abc import Iterable
from pathlib import Path

from adapters.filesystem.file_utils import load_json
from domain.models import GeoJsonObject
from domain.ports.repositories import GeoJsonRepository
from domain.services.parse_geojson import parse_geojson_object

logger = logging.getLogger(__name__)

GEOJSON_PATTERNS = ("*.geojson", "*.json")


class FileSystemGeoJsonRepository(GeoJsonRepository):
    def load_all(self, directory: Path) -> list[GeoJsonObject]:
        return [item for _, item in self.load_all_with_paths(directory)]

    def load_all_with_paths(self, directory: Path) -> list[tuple[Path, GeoJsonObject]]:
        items: list[tuple[Path, GeoJsonObject]] = []
        for path in sorted(set(self._iter_paths(directory))):
            items.append((path, self.load_by_path(path)))
        logger.debug("Loaded %d GeoJSON files from %s", len(items), directory)
        return items

    def load_by_path(self, path: Path) -> GeoJsonObject:
        return parse_geojson_object(load_json(path))

    def _iter_paths(self, directory: Path) -> Iterable[Path]:
        for pattern in GEOJSON_PATTERNS:
            yield from directory.glob(pattern)
