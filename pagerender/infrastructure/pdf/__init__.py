"""PDF infrastructure utilities."""

from .pdf_renderer import PdfRenderer

__all__ = ["PdfRenderer"]
