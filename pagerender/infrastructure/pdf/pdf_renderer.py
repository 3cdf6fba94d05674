"""PDF rasterization for the decode step."""
from __future__ import annotations

import logging
from typing import List

import fitz  # type: ignore
from PIL import Image

from pagerender import constants
from pagerender.domain.entities.decoded_frame import DecodedFrame
from pagerender.domain.exceptions import DecodeError

logger = logging.getLogger(__name__)


class PdfRenderer:
    """Renders every PDF page to an opaque RGB frame on a white background."""

    def __init__(self, *, dpi: int = constants.PDF_RENDER_DPI) -> None:
        if dpi <= 0:
            raise ValueError("dpi must be positive")
        self._dpi = dpi

    def render(self, content: bytes, *, filename: str | None = None) -> List[DecodedFrame]:
        """Render each page in document order and return one frame per page."""

        frames: List[DecodedFrame] = []
        with self._open(content, filename) as document:
            if document.page_count == 0:
                raise DecodeError("PDF contains no pages", filename=filename)

            for index in range(document.page_count):
                try:
                    page = document.load_page(index)
                    # alpha=False paints the page onto an opaque white canvas.
                    pixmap = page.get_pixmap(dpi=self._dpi, alpha=False)
                except RuntimeError as exc:
                    raise DecodeError(
                        f"Unable to render page {index + 1}: {exc}", filename=filename, cause=exc
                    ) from exc

                mode = "L" if pixmap.n == 1 else "RGB"
                image = Image.frombytes(mode, (pixmap.width, pixmap.height), pixmap.samples)
                frames.append(
                    DecodedFrame(
                        image=image,
                        index=index + 1,
                        width=pixmap.width,
                        height=pixmap.height,
                        has_alpha=False,
                        codec_format="PDF",
                    )
                )

        logger.debug("Rendered %s pages for %s at %s dpi", len(frames), filename, self._dpi)
        return frames

    @staticmethod
    def _open(content: bytes, filename: str | None):
        if not content:
            raise DecodeError("PDF is empty", filename=filename)
        try:
            return fitz.open(stream=content, filetype="pdf")
        except (RuntimeError, ValueError) as exc:
            raise DecodeError(f"Unreadable PDF: {exc}", filename=filename, cause=exc) from exc
