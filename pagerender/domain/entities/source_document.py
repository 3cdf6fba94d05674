"""Uploaded source file as received from the transport layer."""
from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import PurePath


@dataclass(frozen=True)
class SourceDocument:
    """Immutable original upload: name plus raw bytes."""

    filename: str
    content: bytes = field(repr=False)

    def __post_init__(self) -> None:
        if not isinstance(self.content, (bytes, bytearray)):
            raise TypeError("content must be bytes")
        if isinstance(self.content, bytearray):
            object.__setattr__(self, "content", bytes(self.content))

    @property
    def extension(self) -> str:
        """Lower-cased suffix including the dot, or ``""``."""
        return PurePath(self.filename or "").suffix.lower()

    @property
    def base_name(self) -> str:
        return PurePath(self.filename or "").stem

    @property
    def is_pdf(self) -> bool:
        return self.extension == ".pdf"

    @property
    def size(self) -> int:
        return len(self.content)
