"""Single decoded raster frame handed between decode, normalize and encode."""
from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import Any, Optional


@dataclass(frozen=True)
class DecodedFrame:
    """
    One page of a PDF or one frame of a raster image.

    ``image`` is the codec library's pixel handle and is treated as opaque by
    the domain. ``index`` is 1-based within the source and ``codec_format`` names the
    container the codec actually found (for example ``"JPEG"``).
    """

    image: Any = field(repr=False)
    index: int
    width: int
    height: int
    has_alpha: bool = False
    codec_format: Optional[str] = None
    icc_profile: Optional[bytes] = field(default=None, repr=False)

    def __post_init__(self) -> None:
        if self.index < 1:
            raise ValueError("index must be >= 1")
        if self.width <= 0 or self.height <= 0:
            raise ValueError("frame dimensions must be positive")

    def with_image(self, image: Any, **changes: Any) -> DecodedFrame:
        """Return a copy carrying ``image`` with its size re-read."""
        width, height = image.size
        return replace(self, image=image, width=width, height=height, **changes)
