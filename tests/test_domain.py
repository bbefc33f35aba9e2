# tests/test_domain.py
"""Tests for vote types and post references."""

import pytest

from stackstudy.core.errors import InvalidArgumentError
from stackstudy.domain import PostRef, VoteType


@pytest.mark.parametrize(
    ("raw", "expected"),
    [
        ("up", VoteType.UP),
        ("Up", VoteType.UP),
        (" DOWN ", VoteType.DOWN),
        (1, VoteType.UP),
        (-1, VoteType.DOWN),
        (VoteType.DOWN, VoteType.DOWN),
    ],
)
def test_vote_type_parse_accepts_names_and_weights(raw, expected) -> None:
    assert VoteType.parse(raw) is expected


@pytest.mark.parametrize("raw", ["sideways", "", 0, 2, True, None, 1.0])
def test_vote_type_parse_rejects_unknown_values(raw) -> None:
    with pytest.raises(InvalidArgumentError):
        VoteType.parse(raw)


def test_vote_type_label_and_weight() -> None:
    assert VoteType.UP.label == "up"
    assert VoteType.DOWN.label == "down"
    assert int(VoteType.UP) + int(VoteType.DOWN) == 0


def test_post_ref_question() -> None:
    ref = PostRef.question(7)
    assert ref.kind == "question"
    assert ref.target_id == 7
    assert ref.answer_id is None
    assert str(ref) == "question:7"


def test_post_ref_answer() -> None:
    ref = PostRef.answer(3)
    assert ref.kind == "answer"
    assert ref.target_id == 3
    assert ref.question_id is None


@pytest.mark.parametrize(("question_id", "answer_id"), [(None, None), (1, 2)])
def test_post_ref_requires_exactly_one_target(question_id, answer_id) -> None:
    with pytest.raises(InvalidArgumentError, match="Exactly one"):
        PostRef(question_id=question_id, answer_id=answer_id)


def test_post_ref_target_id_raises_for_empty_reference() -> None:
    # Bypasses __post_init__ to reach the guard in target_id.
    ref = object.__new__(PostRef)
    object.__setattr__(ref, "question_id", None)
    object.__setattr__(ref, "answer_id", None)

    with pytest.raises(InvalidArgumentError, match="no target"):
        ref.target_id
