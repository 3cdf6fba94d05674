"""
Encoding parameter value objects

One immutable parameter set per target format. The codec validates a set
before encoding and rejects out-of-range values with ``EncodeError``.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import List, Optional, Union

from pagerender import constants
from pagerender.domain.exceptions import EncodeError
from pagerender.domain.value_objects.image_format import ImageFormat

_SUBSAMPLING_MODES = {"4:4:4", "4:2:2", "4:2:0"}


@dataclass(frozen=True)
class PngParams:
    """
    Lossless PNG settings.

    ``quantize_colors`` reduces the palette with error-diffusion dithering
    before compression; ``None`` keeps every color.
    """
    compress_level: int = constants.PNG_COMPRESSION_LEVEL
    quantize_colors: Optional[int] = None

    @property
    def format(self) -> ImageFormat:
        return ImageFormat.PNG

    @property
    def quality(self) -> Optional[int]:
        return None

    def problems(self) -> List[str]:
        problems: List[str] = []
        if not 0 <= self.compress_level <= 9:
            problems.append(f"compress_level must be within 0..9, got {self.compress_level}")
        if self.quantize_colors is not None and self.quantize_colors < 2:
            problems.append(f"quantize_colors must be >= 2, got {self.quantize_colors}")
        return problems


@dataclass(frozen=True)
class JpegParams:
    """Baseline JPEG settings with optimized Huffman tables."""
    quality: int
    optimize_coding: bool = True
    subsampling: str = constants.JPEG_SUBSAMPLING

    @property
    def format(self) -> ImageFormat:
        return ImageFormat.JPEG

    def problems(self) -> List[str]:
        problems: List[str] = []
        if not 1 <= self.quality <= 100:
            problems.append(f"quality must be within 1..100, got {self.quality}")
        if self.subsampling not in _SUBSAMPLING_MODES:
            problems.append(f"unknown chroma subsampling {self.subsampling!r}")
        return problems


@dataclass(frozen=True)
class WebpParams:
    """Lossy WebP settings; ``method`` 6 is the slowest, best compression."""
    quality: int = constants.WEBP_QUALITY
    method: int = constants.WEBP_METHOD

    @property
    def format(self) -> ImageFormat:
        return ImageFormat.WEBP

    def problems(self) -> List[str]:
        problems: List[str] = []
        if not 0 <= self.quality <= 100:
            problems.append(f"quality must be within 0..100, got {self.quality}")
        if not 0 <= self.method <= 6:
            problems.append(f"method must be within 0..6, got {self.method}")
        return problems


EncodingParams = Union[PngParams, JpegParams, WebpParams]


def validate_params(params: EncodingParams) -> None:
    """Raise ``EncodeError`` listing every invalid setting of ``params``."""
    problems = params.problems()
    if problems:
        raise EncodeError(f"Invalid {params.format.value} parameters: {'; '.join(problems)}")
