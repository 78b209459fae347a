from __future__ import annotations

import logging
from pathlib import Path

from adapters.filesystem.file_utils import write_text_atomic
from domain.ports.repositories import SvgRepository

logger = logging.getLogger(__name__)


class FileSystemSvgRepository(SvgRepository):
    def save(self, content: str, path: Path) -> None:
        write_text_atomic(path, content)
        logger.debug("Wrote %d bytes to %s", len(content), path)
