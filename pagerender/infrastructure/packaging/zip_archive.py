"""ZIP packaging of converted documents."""
from __future__ import annotations

import logging
import re
import zipfile
from datetime import datetime, timezone
from io import BytesIO
from pathlib import PurePath, PurePosixPath
from typing import Iterable, Optional

from pagerender.domain.entities.processed_page import ProcessedDocument

logger = logging.getLogger(__name__)

# Characters rejected in file names on at least one mainstream platform.
_INVALID_NAME_CHARS = re.compile(r'[<>:"/\\|?*\x00-\x1f]')


def sanitize_folder_name(name: str) -> str:
    """Replace characters invalid in file names; blank names become ``file``."""
    cleaned = _INVALID_NAME_CHARS.sub("_", name or "")
    return cleaned if cleaned.strip() else "file"


def archive_file_name(now: Optional[datetime] = None) -> str:
    moment = now or datetime.now(timezone.utc)
    return f"converted-{moment:%Y%m%d-%H%M%S}.zip"


def entry_names(document: ProcessedDocument) -> list[str]:
    """Single-page documents sit at the archive root; others get a folder."""
    if document.page_count == 1:
        return [document.pages[0].suggested_file_name]
    folder = sanitize_folder_name(PurePath(document.original_file_name).stem)
    return [f"{folder}/{page.suggested_file_name}" for page in document.pages]


def _unique(name: str, taken: set[str]) -> str:
    if name not in taken:
        return name
    path = PurePosixPath(name)
    counter = 2
    while True:
        candidate = str(path.with_name(f"{path.stem}-{counter}{path.suffix}"))
        if candidate not in taken:
            return candidate
        counter += 1


def build_zip(documents: Iterable[ProcessedDocument]) -> bytes:
    """Write every page of every document into one deflated archive.

    Uploads sharing a name get numbered entries instead of duplicates.
    """
    buffer = BytesIO()
    taken: set[str] = set()
    entries = 0
    with zipfile.ZipFile(buffer, mode="w", compression=zipfile.ZIP_DEFLATED) as archive:
        for document in documents:
            for name, page in zip(entry_names(document), document.pages):
                name = _unique(name, taken)
                taken.add(name)
                archive.writestr(name, page.data)
                entries += 1
    logger.debug("Built archive with %s entries", entries)
    return buffer.getvalue()
