"""
Score fusion for hybrid (lexical + semantic) ranking.

Each score family is rescaled to [0, 1] over the candidate set by dividing
by its maximum (negative values count as 0), then blended linearly:

    final = alpha × lexical + (1 - alpha) × semantic
"""

from typing import Dict, NamedTuple, Optional


class BlendedScore(NamedTuple):
    score: float
    lexical: float
    semantic: float


def normalize_scores(scores: Dict[str, float]) -> Dict[str, float]:
    """
    Divide-by-max normalization with a floor at 0.

    Example:
        >>> normalize_scores({"a": 4.0, "b": 1.0, "c": -2.0})
        {'a': 1.0, 'b': 0.25, 'c': 0.0}
    """
    if not scores:
        return {}

    max_score = max(scores.values())
    if max_score <= 0:
        return {key: 0.0 for key in scores}
    return {key: max(value, 0.0) / max_score for key, value in scores.items()}


def blend_scores(
    lexical: Dict[str, float],
    semantic: Optional[Dict[str, float]],
    alpha: float = 0.5,
) -> Dict[str, BlendedScore]:
    """
    Blend raw lexical and semantic scores.

    Args:
        lexical: Raw lexical scores {doc_id: score} over the candidate set
        semantic: Raw semantic scores, or None/empty when semantic scoring
            is disabled or unavailable (lexical only, alpha ignored)
        alpha: Lexical weight in [0, 1]

    Returns:
        {doc_id: BlendedScore} for every document in either family
    """
    lexical_norm = normalize_scores(lexical)
    if not semantic:
        return {
            doc_id: BlendedScore(score=value, lexical=value, semantic=0.0)
            for doc_id, value in lexical_norm.items()
        }

    semantic_norm = normalize_scores(semantic)
    alpha = min(max(alpha, 0.0), 1.0)

    blended = {}
    for doc_id in dict.fromkeys(list(lexical_norm) + list(semantic_norm)):
        lex = lexical_norm.get(doc_id, 0.0)
        sem = semantic_norm.get(doc_id, 0.0)
        blended[doc_id] = BlendedScore(score=alpha * lex + (1 - alpha) * sem, lexical=lex, semantic=sem)
    return blended
