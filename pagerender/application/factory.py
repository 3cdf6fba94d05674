"""Default wiring of the conversion handlers and the ``process_file`` entry point."""
from __future__ import annotations

import threading
from typing import Optional

from pagerender.application.commands.convert_batch import ConvertBatchHandler
from pagerender.application.commands.convert_document import (
    ConvertDocumentCommand,
    ConvertDocumentHandler,
)
from pagerender.config import Settings, get_settings
from pagerender.domain.entities.processed_page import ProcessedDocument
from pagerender.domain.value_objects.processing_mode import ProcessingMode
from pagerender.infrastructure.imaging import FrameDecoder, FrameNormalizer, PillowImageCodec


def create_convert_document_handler(settings: Optional[Settings] = None) -> ConvertDocumentHandler:
    settings = settings or get_settings()
    return ConvertDocumentHandler(
        decoder=FrameDecoder(),
        normalizer=FrameNormalizer(),
        codec=PillowImageCodec(),
        page_workers=settings.effective_page_workers(),
    )


def create_convert_batch_handler(settings: Optional[Settings] = None) -> ConvertBatchHandler:
    return ConvertBatchHandler(create_convert_document_handler(settings))


def process_file(
    filename: str,
    content: bytes,
    mode: ProcessingMode | str = ProcessingMode.LOSSLESS,
    *,
    cancel_event: Optional[threading.Event] = None,
    handler: Optional[ConvertDocumentHandler] = None,
) -> ProcessedDocument:
    """Convert one file; raises ``ConversionError`` subclasses on failure."""
    handler = handler or create_convert_document_handler()
    command = ConvertDocumentCommand(filename=filename, content=content, mode=ProcessingMode.parse(mode))
    return handler.handle(command, cancel_event)
