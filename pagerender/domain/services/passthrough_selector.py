"""
LosslessPassthroughSelector domain service.

For a single-frame, non-PDF upload in lossless mode the original bytes are
the best possible output: JPEG and WebP are returned untouched, and a PNG is
replaced only by a strictly smaller lossless repack of the same pixels.
"""
from __future__ import annotations

import logging
from typing import Optional, Sequence

from pagerender.domain.entities.decoded_frame import DecodedFrame
from pagerender.domain.entities.encoding_candidate import EncodingCandidate
from pagerender.domain.entities.source_document import SourceDocument
from pagerender.domain.services.candidate_encoder import ImageCodec
from pagerender.domain.services.candidate_selector import select_candidate, strictly_smaller
from pagerender.domain.services.format_policy import source_format
from pagerender.domain.value_objects.image_format import ImageFormat
from pagerender.domain.value_objects.processing_mode import ProcessingMode

logger = logging.getLogger(__name__)

_PNG_SIGNATURE = b"\x89PNG\r\n\x1a\n"

# PNG color types whose 16-bit samples the codec narrows to 8 bits on decode:
# grayscale+alpha, truecolor and truecolor+alpha.
_NARROWED_16BIT_COLOR_TYPES = frozenset({2, 4, 6})


def png_header(content: bytes) -> Optional[tuple[int, int]]:
    """Return ``(bit_depth, color_type)`` from a PNG IHDR chunk, if present."""
    if len(content) < 26 or not content.startswith(_PNG_SIGNATURE) or content[12:16] != b"IHDR":
        return None
    return content[24], content[25]


def repack_would_narrow(content: bytes) -> bool:
    header = png_header(content)
    if header is None:
        return False
    bit_depth, color_type = header
    return bit_depth == 16 and color_type in _NARROWED_16BIT_COLOR_TYPES


class LosslessPassthroughSelector:
    """Chooses between the original bytes and a lossless repack."""

    def __init__(self, codec: ImageCodec):
        self._codec = codec

    @staticmethod
    def applies(source: SourceDocument, frames: Sequence[DecodedFrame], mode: ProcessingMode) -> bool:
        if mode is not ProcessingMode.LOSSLESS or source.is_pdf or len(frames) != 1:
            return False
        declared = source_format(source.extension)
        if declared is None:
            return False
        # An extension that lies about the container cannot be passed through.
        return frames[0].codec_format in (None, declared.codec_name)

    def select(self, source: SourceDocument, frames: Sequence[DecodedFrame], mode: ProcessingMode) -> Optional[EncodingCandidate]:
        """Return the passthrough candidate, or ``None`` when re-encoding is required."""
        if not self.applies(source, frames, mode):
            return None

        frame = frames[0]
        declared = source_format(source.extension)
        original = EncodingCandidate(
            format=declared,
            data=source.content,
            width=frame.width,
            height=frame.height,
            label="original",
        )

        if declared in (ImageFormat.JPEG, ImageFormat.WEBP):
            logger.debug("Passing %s through unchanged", source.filename)
            return original

        if repack_would_narrow(source.content):
            logger.debug("Keeping 16-bit PNG %s without repacking", source.filename)
            return original

        repacked = self._codec.repack_png(frame.image)
        return select_candidate([original, repacked], strictly_smaller)
