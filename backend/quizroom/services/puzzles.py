"""Answer checking for the single-player puzzle mode.

Unlike the multiplayer quiz, which is exact-match only, these puzzles give
partial credit. The quiz core does not use anything in this module.
"""

import math
from dataclasses import dataclass

PATTERN = 'pattern'
LOGIC = 'logic'
SPATIAL = 'spatial'

FULL_SCORE = 100
MISS_PENALTY = 20


@dataclass
class ValidationResult:
    is_correct: bool
    score: int
    feedback: str

    def to_dict(self):
        return {'isCorrect': self.is_correct, 'score': self.score, 'feedback': self.feedback}


def _round(value: float) -> int:
    # Half-up, so 62.5 scores 63 rather than banker's 62
    return int(math.floor(value + 0.5))


def _as_text(value) -> str:
    if isinstance(value, float) and value.is_integer():
        value = int(value)
    return str(value)


def _validate_pattern(answer, solution) -> ValidationResult:
    if not isinstance(answer, list) or not isinstance(solution, list):
        return ValidationResult(False, 0, "Pattern doesn't match exactly")
    is_correct = len(answer) == len(solution) and all(cell in solution for cell in answer)
    if is_correct:
        return ValidationResult(True, FULL_SCORE, 'Perfect pattern match!')
    score = max(0, FULL_SCORE - abs(len(answer) - len(solution)) * MISS_PENALTY)
    return ValidationResult(False, score, "Pattern doesn't match exactly")


def _validate_logic(answer, solution) -> ValidationResult:
    if answer is not None and _as_text(answer) == _as_text(solution):
        return ValidationResult(True, FULL_SCORE, 'Correct sequence completion!')
    return ValidationResult(False, 0, 'Wrong number in sequence')


def _validate_spatial(answer, solution) -> ValidationResult:
    if not isinstance(answer, list) or not isinstance(solution, list) or not solution:
        return ValidationResult(False, 0, '')
    hits = sum(1 for block in answer if block in solution)
    false_positives = len(answer) - hits
    misses = len(solution) - hits
    is_correct = hits == len(solution) and false_positives == 0
    raw = hits * FULL_SCORE / len(solution) - false_positives * MISS_PENALTY - misses * MISS_PENALTY
    feedback = 'Perfect spatial recognition!' if is_correct else f'{hits}/{len(solution)} correct selections'
    return ValidationResult(is_correct, _round(max(0.0, raw)), feedback)


_VALIDATORS = {
    PATTERN: _validate_pattern,
    LOGIC: _validate_logic,
    SPATIAL: _validate_spatial,
}


def validate_answer(puzzle_type: str, answer, solution) -> ValidationResult:
    validator = _VALIDATORS.get(puzzle_type)
    if validator is None:
        return ValidationResult(False, 0, 'Unknown puzzle type')
    return validator(answer, solution)
