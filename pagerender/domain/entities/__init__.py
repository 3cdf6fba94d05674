"""
Domain Entities

Source documents, decoded frames, candidates and converted pages.
"""
from .decoded_frame import DecodedFrame
from .encoding_candidate import EncodingCandidate
from .processed_page import ProcessedDocument, ProcessedPage, suggested_file_name
from .source_document import SourceDocument

__all__ = [
    'DecodedFrame',
    'EncodingCandidate',
    'ProcessedDocument',
    'ProcessedPage',
    'SourceDocument',
    'suggested_file_name',
]
