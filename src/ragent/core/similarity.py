"""
Similarity scoring used by the vector index.
"""

import math
from collections.abc import Sequence


def cosine_similarity(a: Sequence[float], b: Sequence[float]) -> float:
    """
    Cosine similarity between two equal-length vectors.

    A zero-magnitude vector has similarity 0.0 against any vector.

    Raises:
        ValueError: If the vectors differ in length
    """
    if len(a) != len(b):
        raise ValueError(f"Vectors must have the same length ({len(a)} != {len(b)})")

    dot_product = sum(x * y for x, y in zip(a, b))
    norm_a = math.sqrt(sum(x * x for x in a))
    norm_b = math.sqrt(sum(y * y for y in b))

    if norm_a == 0 or norm_b == 0:
        return 0.0

    # Rounding can push |v.v| / (|v| |v|) slightly past 1
    return max(-1.0, min(1.0, dot_product / (norm_a * norm_b)))


def lexical_similarity(query: str, text: str) -> float:
    """
    Fraction of query tokens that are a substring of, or contain, a text token.

    Tokens are lower-cased and split on whitespace. An empty query scores 0.0.
    """
    query_tokens = query.lower().split()
    if not query_tokens:
        return 0.0
    text_tokens = set(text.lower().split())

    matches = 0
    for word in query_tokens:
        if any(word in token or token in word for token in text_tokens):
            matches += 1

    return matches / len(query_tokens)
