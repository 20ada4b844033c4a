"""Decoding of ``/embeddings`` response bodies."""

import logging

from .errors import EmbeddingClientError

logger = logging.getLogger(__name__)


def parse_embedding_response(
    response_data: dict, expected_count: int, expected_dimension: int
) -> list[list[float]]:
    """
    Pull the vectors out of an embeddings response body.

    Items are reordered by their ``index`` field so the result lines up with
    the request's inputs. A vector of unexpected length is kept and logged;
    cosine scoring skips it against queries of a different length.

    Raises:
        EmbeddingClientError: If the body lacks vectors or has the wrong count
    """
    try:
        items = response_data.get("data", [])
        if len(items) != expected_count:
            raise EmbeddingClientError(
                f"Embedding response has {len(items)} vectors, expected {expected_count}"
            )

        vectors = []
        for item in sorted(items, key=lambda entry: entry.get("index", 0)):
            vector = [float(v) for v in item["embedding"]]
            if len(vector) != expected_dimension:
                logger.warning(
                    f"Embedding has {len(vector)} dimensions, expected {expected_dimension}"
                )
            vectors.append(vector)
        return vectors

    except (AttributeError, KeyError, TypeError, ValueError) as e:
        raise EmbeddingClientError(f"Malformed embedding response: {e}") from e
