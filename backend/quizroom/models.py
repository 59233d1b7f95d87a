import random
import re
import string
import time
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Set, Tuple

WAITING = 'waiting'
ACTIVE = 'active'
FINISHED = 'finished'

OPTION_COUNT = 4
ROOM_CODE_PATTERN = re.compile(r'^[A-Z0-9]{4,6}$')


def generate_room_code(length=6):
    """Generate a random room code. Uniqueness is the registry's job."""
    return ''.join(random.choices(string.ascii_uppercase + string.digits, k=length))


def normalize_room_code(code) -> str:
    if not isinstance(code, str):
        return ''
    return code.strip().upper()


@dataclass(frozen=True)
class Question:
    text: str
    options: Tuple[str, ...]
    correct_index: int
    time_limit: Optional[int] = None

    @classmethod
    def from_dict(cls, data) -> Optional['Question']:
        """Build a question from a client payload, or None if it is malformed."""
        if not isinstance(data, dict):
            return None
        text = data.get('question', data.get('text'))
        if not isinstance(text, str) or not text.strip():
            return None
        options = data.get('options')
        if not isinstance(options, (list, tuple)) or len(options) != OPTION_COUNT:
            return None
        if any(not isinstance(opt, str) or not opt.strip() for opt in options):
            return None
        correct = data.get('correctAnswer', data.get('correctOptionIndex'))
        # bool is an int subclass; True must not mean option 1
        if isinstance(correct, bool) or not isinstance(correct, int):
            return None
        if not 0 <= correct < OPTION_COUNT:
            return None
        time_limit = data.get('timeLimit')
        if isinstance(time_limit, bool) or not isinstance(time_limit, int) or time_limit <= 0:
            time_limit = None
        return cls(
            text=text.strip(),
            options=tuple(opt.strip() for opt in options),
            correct_index=correct,
            time_limit=time_limit,
        )

    def to_public_dict(self):
        return {'question': self.text, 'options': list(self.options)}


def parse_questions(items) -> List[Question]:
    """Keep the well-formed questions, in their original order."""
    if not isinstance(items, (list, tuple)):
        return []
    parsed = (Question.from_dict(item) for item in items)
    return [q for q in parsed if q is not None]


@dataclass
class Player:
    sid: str
    name: str
    connected: bool = True
    joined_at: float = field(default_factory=time.time)

    def to_dict(self):
        return {
            'id': self.sid,
            'name': self.name,
            'connected': self.connected,
            'joinedAt': int(self.joined_at * 1000),
        }


@dataclass
class Room:
    code: str
    host_sid: str
    host_name: str
    questions: Tuple[Question, ...]
    players: List[Player] = field(default_factory=list)
    state: str = WAITING
    cursor: int = 0
    scores: Dict[str, int] = field(default_factory=dict)
    # Connections that already answered the current question
    answered: Set[str] = field(default_factory=set)
    question_started_at: Optional[float] = None
    created_at: float = field(default_factory=time.time)

    def is_host(self, sid) -> bool:
        return sid == self.host_sid

    def get_player(self, sid) -> Optional[Player]:
        for player in self.players:
            if player.sid == sid:
                return player
        return None

    @property
    def current_question(self) -> Optional[Question]:
        if self.state != ACTIVE or not 0 <= self.cursor < len(self.questions):
            return None
        return self.questions[self.cursor]

    def roster(self):
        return [p.to_dict() for p in self.players]

    def to_dict(self):
        """Public snapshot; never includes the correct answers."""
        return {
            'roomCode': self.code,
            'state': self.state,
            'hostName': self.host_name,
            'players': self.roster(),
            'playerCount': len(self.players),
            'questionCount': len(self.questions),
            'questionNumber': self.cursor + 1 if self.state == ACTIVE else None,
            'createdAt': int(self.created_at * 1000),
        }
