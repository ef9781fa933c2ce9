"""
Message risk placeholder.

There is no message classifier yet. evaluate_message() keeps the behaviour the
app has always shipped: the text is not inspected, the verdict is always safe
and the risk score is a uniform random integer in [0, 100). Callers and tests
must treat the score as non-deterministic.
"""

from __future__ import annotations

import random

from backend_safespace.analytics.models import Verdict
from backend_safespace.safespace_logging import get_logger

logger = get_logger(__name__)

PLACEHOLDER_SCORE_UPPER = 100  # exclusive


def evaluate_message(text: str, *, rng: random.Random | None = None) -> Verdict:
    """
    Return the placeholder verdict for a message.

    rng: random source (default: module-level random); pass a seeded
    random.Random to get repeatable scores.
    """
    source = rng if rng is not None else random
    risk_score = source.randrange(PLACEHOLDER_SCORE_UPPER)
    logger.debug("message_risk_placeholder", length=len(text or ""), risk_score=risk_score)
    return Verdict(
        is_safe=True,
        risk_score=risk_score,
        categories=[],
        flagged_words=[],
    )
