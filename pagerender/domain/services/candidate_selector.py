"""
SizeAwareSelector domain service.

Competing encodings are modelled as an ordered sequence: the first entry is
the incumbent and each later entry is a challenger that replaces the
current choice only when the declared comparator accepts it. Both the
"repacked PNG vs original" and "JPEG vs PNG" decisions run through here.
"""
from __future__ import annotations

import logging
from fractions import Fraction
from typing import Callable, Sequence

from pagerender import constants
from pagerender.domain.entities.encoding_candidate import EncodingCandidate

logger = logging.getLogger(__name__)

Comparator = Callable[[EncodingCandidate, EncodingCandidate], bool]


def strictly_smaller(challenger: EncodingCandidate, incumbent: EncodingCandidate) -> bool:
    """Accept the challenger only when it is smaller; ties keep the incumbent."""
    return challenger.size < incumbent.size


def smaller_by_ratio(ratio: Fraction) -> Comparator:
    """Build a comparator accepting challengers below ``ratio`` of the incumbent size."""
    if not 0 < ratio <= 1:
        raise ValueError("ratio must be within (0, 1]")

    def _compare(challenger: EncodingCandidate, incumbent: EncodingCandidate) -> bool:
        # Integer * Fraction stays exact, so boundary sizes never round.
        return challenger.size < incumbent.size * ratio

    _compare.__name__ = f"smaller_by_ratio_{ratio.numerator}_{ratio.denominator}"
    return _compare


# JPEG must be at least 15% smaller than PNG to be worth its fidelity risk.
substantially_smaller: Comparator = smaller_by_ratio(constants.JPEG_SELECTION_RATIO)


def select_candidate(candidates: Sequence[EncodingCandidate], accept: Comparator = strictly_smaller) -> EncodingCandidate:
    """Return the winning candidate; a single candidate wins trivially."""
    if not candidates:
        raise ValueError("at least one candidate is required")

    chosen = candidates[0]
    for challenger in candidates[1:]:
        if accept(challenger, chosen):
            chosen = challenger

    if len(candidates) > 1:
        logger.debug(
            "Selected %s among %s",
            chosen.describe(),
            ", ".join(candidate.describe() for candidate in candidates),
        )
    return chosen
