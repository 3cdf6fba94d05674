"""Provisionally encoded page bytes awaiting selection."""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional

from pagerender.domain.value_objects.encoding_params import EncodingParams
from pagerender.domain.value_objects.image_format import ImageFormat


@dataclass(frozen=True)
class EncodingCandidate:
    """Transient encoding result; never persisted."""

    format: ImageFormat
    data: bytes = field(repr=False)
    width: int
    height: int
    params: Optional[EncodingParams] = None
    label: str = ""

    @property
    def size(self) -> int:
        return len(self.data)

    def describe(self) -> str:
        name = self.label or self.format.value
        return f"{name}({self.size} bytes, {self.width}x{self.height})"
