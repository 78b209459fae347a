from __future__ import annotations


class InvalidGeoJsonError(ValueError):
    def __init__(self, kind: str, source: str) -> None:
        self.kind = kind
        self.source = source
        super().__init__(f"invalid {kind}: {source}")
