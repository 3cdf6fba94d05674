"""Decode collaborator: dispatches PDFs and raster images to their decoders."""
from __future__ import annotations

from typing import List, Optional

from pagerender.domain.entities.decoded_frame import DecodedFrame
from pagerender.domain.entities.source_document import SourceDocument
from pagerender.infrastructure.imaging.raster_decoder import RasterDecoder
from pagerender.infrastructure.pdf.pdf_renderer import PdfRenderer


class FrameDecoder:
    """Turns a source document into its ordered frames."""

    def __init__(self, pdf_renderer: Optional[PdfRenderer] = None, raster_decoder: Optional[RasterDecoder] = None):
        self._pdf = pdf_renderer or PdfRenderer()
        self._raster = raster_decoder or RasterDecoder()

    def decode(self, source: SourceDocument) -> List[DecodedFrame]:
        if source.is_pdf:
            return self._pdf.render(source.content, filename=source.filename)
        return self._raster.decode(source.content, filename=source.filename)
