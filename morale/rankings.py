"""
Top drainers / uplifters and the dimension they point at.

Works on the raw (uncalibrated) answers. Pure functions, no side effects.
"""

from typing import List, Optional, Sequence, Tuple

import pandas as pd

from morale.schema import DIMENSIONS, QUESTION_DIMENSIONS, Answer, RankedAnswer


def _answered_frame(answers: Sequence[Answer]) -> pd.DataFrame:
    rows = [
        {"index": i, "score": a.score, "note": a.note}
        for i, a in enumerate(answers)
        if a.score is not None
    ]
    return pd.DataFrame(rows, columns=["index", "score", "note"])


def _to_ranked(df: pd.DataFrame) -> Tuple[RankedAnswer, ...]:
    return tuple(
        RankedAnswer(
            index=int(r["index"]),
            score=float(r["score"]),
            note=None if pd.isna(r["note"]) else r["note"],
        )
        for _, r in df.iterrows()
    )


def rank_answers(
    answers: Sequence[Answer],
    n: int = 3,
) -> Tuple[Tuple[RankedAnswer, ...], Tuple[RankedAnswer, ...]]:
    """
    The n lowest (ascending) and n highest (descending) raw scores.

    Equal scores keep input order (stable sort). Fewer than n answers
    return only what exists.
    """
    df = _answered_frame(answers)
    if df.empty:
        return (), ()

    drainers = df.sort_values("score", ascending=True, kind="mergesort").head(n)
    uplifters = df.sort_values("score", ascending=False, kind="mergesort").head(n)
    return _to_ranked(drainers), _to_ranked(uplifters)


def dominant_dimension(items: Sequence[RankedAnswer]) -> Optional[str]:
    """
    Dimension appearing most often among the ranked questions.

    Ties go to the dimension listed first (Fulfillment … Peace).
    """
    counts: List[int] = [0] * len(DIMENSIONS)
    for item in items:
        if 0 <= item.index < len(QUESTION_DIMENSIONS):
            counts[DIMENSIONS.index(QUESTION_DIMENSIONS[item.index])] += 1

    best = max(counts, default=0)
    if best == 0:
        return None
    return DIMENSIONS[counts.index(best)]
