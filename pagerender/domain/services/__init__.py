"""
Domain Services

Stateless decision logic of the per-page encoding engine.
"""
from .candidate_encoder import CandidateEncoder, EncodingPlan, ImageCodec, plan_encoding
from .candidate_selector import (
    select_candidate,
    smaller_by_ratio,
    strictly_smaller,
    substantially_smaller,
)
from .format_policy import source_format, target_format
from .passthrough_selector import LosslessPassthroughSelector

__all__ = [
    'CandidateEncoder',
    'EncodingPlan',
    'ImageCodec',
    'LosslessPassthroughSelector',
    'plan_encoding',
    'select_candidate',
    'smaller_by_ratio',
    'source_format',
    'strictly_smaller',
    'substantially_smaller',
    'target_format',
]
