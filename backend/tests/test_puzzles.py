import pytest

from quizroom.services.puzzles import validate_answer


def test_pattern_exact_match():
    result = validate_answer('pattern', [3, 1, 7], [1, 3, 7])
    assert (result.is_correct, result.score) == (True, 100)
    assert result.feedback == 'Perfect pattern match!'


@pytest.mark.parametrize('answer, expected', [
    ([1, 3], 80),
    ([1], 60),
    ([1, 3, 9], 100),
    ([], 40),
])
def test_pattern_partial_credit_follows_length(answer, expected):
    result = validate_answer('pattern', answer, [1, 3, 7])
    assert result.is_correct is False
    assert result.score == expected


def test_pattern_rejects_non_lists():
    assert validate_answer('pattern', 'nope', [1]).score == 0


@pytest.mark.parametrize('answer, solution, correct', [
    (12, 12, True),
    ('12', 12, True),
    (12.0, 12, True),
    (13, 12, False),
    (None, 12, False),
])
def test_logic_is_exact_match(answer, solution, correct):
    result = validate_answer('logic', answer, solution)
    assert result.is_correct is correct
    assert result.score == (100 if correct else 0)


def test_spatial_perfect_selection():
    result = validate_answer('spatial', [4, 2], [2, 4])
    assert (result.is_correct, result.score, result.feedback) == (True, 100, 'Perfect spatial recognition!')


@pytest.mark.parametrize('answer, expected', [
    ([2], 30),          # 50 - 20 for the miss
    ([2, 4, 5], 80),    # 100 - 20 for the extra pick
    ([5, 6], 0),        # floored at zero
])
def test_spatial_penalises_misses_and_extras(answer, expected):
    result = validate_answer('spatial', answer, [2, 4])
    assert result.is_correct is False
    assert result.score == expected


def test_spatial_empty_solution_scores_zero():
    assert validate_answer('spatial', [1], []).score == 0


def test_unknown_puzzle_type():
    result = validate_answer('riddle', 1, 1)
    assert (result.is_correct, result.score, result.feedback) == (False, 0, 'Unknown puzzle type')
