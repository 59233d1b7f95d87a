from dataclasses import dataclass
from typing import Any, Dict, List

from quizroom.errors import AlreadyAnswered
from quizroom.models import Room

BASE_POINTS = 100
BONUS_WINDOW_SEC = 30
BONUS_PER_SECOND = 2


@dataclass
class AnswerResult:
    is_correct: bool
    points: int
    correct_index: int
    total: int

    def to_dict(self):
        return {
            'isCorrect': self.is_correct,
            'score': self.points,
            'correctAnswer': self.correct_index,
            'currentScore': self.total,
        }


def _seconds(value) -> float:
    # Anything unusable earns no time bonus
    if isinstance(value, bool) or not isinstance(value, (int, float)) or value != value:
        return float(BONUS_WINDOW_SEC)
    try:
        seconds = float(value)
    except OverflowError:
        # Integers too big for a float
        return float(BONUS_WINDOW_SEC)
    return max(0.0, seconds)


def points_for(is_correct: bool, time_spent) -> int:
    """Base points plus a linear time bonus that bottoms out at zero."""
    if not is_correct:
        return 0
    bonus = max(0.0, (BONUS_WINDOW_SEC - _seconds(time_spent)) * BONUS_PER_SECOND)
    return BASE_POINTS + int(bonus + 0.5)


def record_answer(room: Room, sid: str, answer, time_spent, single_answer: bool = True) -> AnswerResult:
    """Score an answer to the room's current question.

    The caller has already checked that the room is active and that `sid` is
    on the roster. Raises AlreadyAnswered before touching the scores.
    """
    question = room.current_question
    if single_answer and sid in room.answered:
        raise AlreadyAnswered()
    is_correct = (
        not isinstance(answer, bool)
        and isinstance(answer, int)
        and answer == question.correct_index
    )
    points = points_for(is_correct, time_spent)
    room.answered.add(sid)
    room.scores[sid] = room.scores.get(sid, 0) + points
    return AnswerResult(
        is_correct=is_correct,
        points=points,
        correct_index=question.correct_index,
        total=room.scores[sid],
    )


def build_leaderboard(room: Room) -> List[Dict[str, Any]]:
    """Every player on the roster, highest score first.

    sorted() is stable, so equal scores stay in join order.
    """
    rows = [
        {'id': p.sid, 'name': p.name, 'score': room.scores.get(p.sid, 0)}
        for p in room.players
    ]
    return sorted(rows, key=lambda row: -row['score'])
