"""
Property-based tests for cosine and lexical similarity.
"""

import math

import pytest
from hypothesis import assume, given, settings
from hypothesis import strategies as st

from ragent.core.similarity import cosine_similarity, lexical_similarity

component = st.floats(min_value=-1000, max_value=1000, allow_nan=False, allow_infinity=False)


def non_zero(vector: list[float]) -> bool:
    return math.sqrt(sum(v * v for v in vector)) > 1e-3


@given(v=st.lists(component, min_size=1, max_size=32))
@settings(max_examples=200)
def test_self_similarity_is_one(v: list[float]):
    assume(non_zero(v))
    assert cosine_similarity(v, v) == pytest.approx(1.0, abs=1e-9)


@given(v=st.lists(component, min_size=1, max_size=32))
@settings(max_examples=200)
def test_opposite_similarity_is_minus_one(v: list[float]):
    assume(non_zero(v))
    assert cosine_similarity(v, [-x for x in v]) == pytest.approx(-1.0, abs=1e-9)


@given(v=st.lists(component, min_size=1, max_size=32))
@settings(max_examples=100)
def test_zero_vector_similarity_is_zero(v: list[float]):
    assert cosine_similarity(v, [0.0] * len(v)) == 0.0


@given(data=st.data(), size=st.integers(min_value=1, max_value=32))
@settings(max_examples=200)
def test_cosine_is_symmetric_and_bounded(data, size: int):
    a = data.draw(st.lists(component, min_size=size, max_size=size))
    b = data.draw(st.lists(component, min_size=size, max_size=size))
    ab = cosine_similarity(a, b)
    assert ab == pytest.approx(cosine_similarity(b, a), abs=1e-12)
    assert -1.0 <= ab <= 1.0


def test_length_mismatch_raises():
    with pytest.raises(ValueError):
        cosine_similarity([1.0, 2.0], [1.0])


words = st.text(alphabet="abcdefg", min_size=1, max_size=6)


@given(query=st.lists(words, min_size=1, max_size=8), text=st.lists(words, max_size=20))
@settings(max_examples=200)
def test_lexical_similarity_is_a_fraction(query: list[str], text: list[str]):
    score = lexical_similarity(" ".join(query), " ".join(text))
    assert 0.0 <= score <= 1.0


def test_lexical_similarity_examples():
    assert lexical_similarity("", "anything") == 0.0
    assert lexical_similarity("   ", "anything") == 0.0
    assert lexical_similarity("Agent memory", "the agent keeps memory") == 1.0
    # "run" is contained in "running"; "fast" matches nothing
    assert lexical_similarity("run fast", "running slowly") == 0.5
    assert lexical_similarity("cat", "dog") == 0.0
