"""
CandidateEncoder domain service.

Decides which encodings to attempt for a normalized frame and in which
order, then delegates the byte work to an injected codec. The plan is a
pure function of (mode, target format, PDF-ness) so every branch can be
tested without touching pixels.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, List, Protocol, Tuple

from pagerender import constants
from pagerender.domain.entities.decoded_frame import DecodedFrame
from pagerender.domain.entities.encoding_candidate import EncodingCandidate
from pagerender.domain.exceptions import UnsupportedModeError
from pagerender.domain.services.candidate_selector import (
    Comparator,
    select_candidate,
    strictly_smaller,
    substantially_smaller,
)
from pagerender.domain.value_objects.encoding_params import (
    EncodingParams,
    JpegParams,
    PngParams,
    WebpParams,
)
from pagerender.domain.value_objects.image_format import ImageFormat
from pagerender.domain.value_objects.processing_mode import ProcessingMode

logger = logging.getLogger(__name__)


class ImageCodec(Protocol):
    def encode(self, image: Any, params: EncodingParams, *, label: str = "") -> EncodingCandidate: ...

    def repack_png(self, image: Any) -> EncodingCandidate: ...


@dataclass(frozen=True)
class EncodingPlan:
    """Ordered encodings to attempt; the first is the incumbent."""

    params: Tuple[EncodingParams, ...]
    accept: Comparator = strictly_smaller

    def __post_init__(self) -> None:
        if not self.params:
            raise ValueError("an encoding plan needs at least one parameter set")

    @property
    def formats(self) -> Tuple[ImageFormat, ...]:
        return tuple(params.format for params in self.params)


LOSSLESS_PNG = PngParams()
WEBP_TARGET = WebpParams(quality=constants.WEBP_QUALITY, method=constants.WEBP_METHOD)
JPEG_TARGET = JpegParams(quality=constants.JPEG_TARGET_QUALITY)
JPEG_FALLBACK = JpegParams(quality=constants.JPEG_FALLBACK_QUALITY)
QUANTIZED_PNG = PngParams(quantize_colors=constants.QUANTIZE_MAX_COLORS)


def plan_encoding(mode: ProcessingMode, target: ImageFormat, is_pdf: bool) -> EncodingPlan:
    """Return the candidate plan for one frame."""
    if mode is ProcessingMode.LOSSLESS:
        return EncodingPlan(params=(LOSSLESS_PNG,))
    if mode is not ProcessingMode.AUTO:
        raise UnsupportedModeError(mode)

    if target is ImageFormat.WEBP:
        return EncodingPlan(params=(WEBP_TARGET,))
    if target is ImageFormat.JPEG:
        return EncodingPlan(params=(JPEG_TARGET,))

    # PNG target: race a (possibly quantized) PNG against a high-quality JPEG.
    # PDF renders skip quantization to keep text edges exact.
    png = LOSSLESS_PNG if is_pdf else QUANTIZED_PNG
    return EncodingPlan(params=(png, JPEG_FALLBACK), accept=substantially_smaller)


class CandidateEncoder:
    """Encodes normalized frames according to their plan and picks the winner."""

    def __init__(self, codec: ImageCodec):
        self._codec = codec

    def encode_candidates(self, frame: DecodedFrame, plan: EncodingPlan) -> List[EncodingCandidate]:
        return [self._codec.encode(frame.image, params) for params in plan.params]

    def encode(self, frame: DecodedFrame, mode: ProcessingMode, target: ImageFormat, is_pdf: bool) -> EncodingCandidate:
        plan = plan_encoding(mode, target, is_pdf)
        candidates = self.encode_candidates(frame, plan)
        chosen = select_candidate(candidates, plan.accept)
        logger.debug(
            "Frame %s encoded as %s",
            frame.index,
            chosen.format.value,
            extra={
                "frame": frame.index,
                "candidates": ",".join(image_format.value for image_format in plan.formats),
                "bytes": chosen.size,
            },
        )
        return chosen
