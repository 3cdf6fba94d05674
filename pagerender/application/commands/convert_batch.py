"""ConvertBatch command - converts several uploads, isolating per-file failures."""
from __future__ import annotations

import logging
import threading
from dataclasses import dataclass, field
from typing import List, Optional, Sequence, Tuple

from pagerender.application.commands.convert_document import (
    ConvertDocumentCommand,
    ConvertDocumentHandler,
)
from pagerender.domain.entities.processed_page import ProcessedDocument
from pagerender.domain.exceptions import ConversionCancelledError, ConversionError
from pagerender.domain.value_objects.processing_mode import ProcessingMode

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class UploadedFile:
    filename: str
    content: bytes = field(repr=False)


@dataclass(frozen=True)
class ConvertBatchCommand:
    files: Tuple[UploadedFile, ...]
    mode: ProcessingMode = ProcessingMode.LOSSLESS

    def __post_init__(self) -> None:
        object.__setattr__(self, "files", tuple(self.files))


@dataclass(frozen=True)
class FileConversionOutcome:
    """Result for one file of a batch: a document or an error message."""

    filename: str
    document: Optional[ProcessedDocument] = None
    error: Optional[str] = None
    error_type: Optional[str] = None

    @property
    def succeeded(self) -> bool:
        return self.document is not None


class ConvertBatchHandler:
    """Converts files one after another; one bad file never aborts the rest."""

    def __init__(self, document_handler: ConvertDocumentHandler):
        self._documents = document_handler

    def handle(self, command: ConvertBatchCommand, cancel_event: Optional[threading.Event] = None) -> List[FileConversionOutcome]:
        mode = ProcessingMode.parse(command.mode)
        outcomes: List[FileConversionOutcome] = []
        for upload in command.files:
            outcomes.append(self._convert_one(upload, mode, cancel_event))

        failed = sum(1 for outcome in outcomes if not outcome.succeeded)
        logger.info(
            "Batch conversion finished",
            extra={"files": len(outcomes), "failed": failed, "mode": mode.value},
        )
        return outcomes

    def _convert_one(
        self,
        upload: UploadedFile,
        mode: ProcessingMode,
        cancel_event: Optional[threading.Event],
    ) -> FileConversionOutcome:
        command = ConvertDocumentCommand(filename=upload.filename, content=upload.content, mode=mode)
        try:
            document = self._documents.handle(command, cancel_event)
        except ConversionCancelledError:
            raise
        except ConversionError as exc:
            logger.warning(
                "Conversion failed for %s: %s",
                upload.filename,
                exc,
                extra={"file_name": upload.filename, "error_type": type(exc).__name__},
            )
            return FileConversionOutcome(
                filename=upload.filename,
                error=str(exc),
                error_type=type(exc).__name__,
            )
        return FileConversionOutcome(filename=upload.filename, document=document)


def failed_outcomes(outcomes: Sequence[FileConversionOutcome]) -> List[FileConversionOutcome]:
    return [outcome for outcome in outcomes if not outcome.succeeded]
