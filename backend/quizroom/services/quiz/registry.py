import logging
import threading
from typing import Callable, Dict, Iterator, Optional

from quizroom.errors import AlreadyInRoom, InvalidRoomCode, NoValidQuestions, RoomCodeTaken
from quizroom.models import ROOM_CODE_PATTERN, Room, generate_room_code, normalize_room_code, parse_questions

logger = logging.getLogger(__name__)


class RoomRegistry:
    """Process-wide store of live rooms, keyed by room code.

    Also remembers which room each connection belongs to so a disconnect can
    be routed without the client telling us. All access from handlers goes
    through `lock`.
    """

    def __init__(self, code_length: int = 6, default_time_limit: int = 30,
                 single_answer: bool = True, new_code: Optional[Callable[[int], str]] = None):
        self.lock = threading.RLock()
        self.code_length = code_length
        self.default_time_limit = default_time_limit
        self.single_answer = single_answer
        self._new_code = new_code or generate_room_code
        self._rooms: Dict[str, Room] = {}
        self._connections: Dict[str, str] = {}

    def init_app(self, app) -> None:
        self.code_length = int(app.config.get('ROOM_CODE_LENGTH', 6))
        self.default_time_limit = int(app.config.get('QUESTION_TIME_LIMIT_SEC', 30))
        self.single_answer = bool(app.config.get('SINGLE_ANSWER_PER_QUESTION', True))
        self.clear()
        app.extensions['quizroom'] = self

    def clear(self) -> None:
        with self.lock:
            self._rooms.clear()
            self._connections.clear()

    def __len__(self) -> int:
        return len(self._rooms)

    def __contains__(self, code) -> bool:
        return normalize_room_code(code) in self._rooms

    def __iter__(self) -> Iterator[Room]:
        return iter(list(self._rooms.values()))

    def _unique_code(self) -> str:
        while True:
            code = self._new_code(self.code_length)
            if code not in self._rooms:
                return code
            logger.info(f"[code-collision] code={code} retrying")

    def create_room(self, host_sid: str, host_name: str, questions, desired_code=None) -> Room:
        if host_sid in self._connections:
            raise AlreadyInRoom()
        if desired_code:
            code = normalize_room_code(desired_code)
            if not ROOM_CODE_PATTERN.match(code):
                raise InvalidRoomCode()
            if code in self._rooms:
                raise RoomCodeTaken()
        else:
            code = None
        parsed = parse_questions(questions)
        if not parsed:
            raise NoValidQuestions()
        if code is None:
            code = self._unique_code()
        dropped = len(questions) - len(parsed) if isinstance(questions, (list, tuple)) else 0
        if dropped:
            logger.info(f"[questions-dropped] room={code} dropped={dropped}")

        room = Room(code=code, host_sid=host_sid, host_name=host_name, questions=tuple(parsed))
        self._rooms[code] = room
        self._connections[host_sid] = code
        return room

    def get_room(self, code) -> Optional[Room]:
        return self._rooms.get(normalize_room_code(code))

    def delete_room(self, code) -> Optional[Room]:
        room = self._rooms.pop(normalize_room_code(code), None)
        if room is None:
            return None
        for sid in [sid for sid, c in self._connections.items() if c == room.code]:
            self._connections.pop(sid, None)
        return room

    def attach(self, sid: str, code: str) -> None:
        if sid in self._connections:
            raise AlreadyInRoom()
        self._connections[sid] = code

    def detach(self, sid: str) -> Optional[str]:
        return self._connections.pop(sid, None)

    def room_for(self, sid: str) -> Optional[Room]:
        code = self._connections.get(sid)
        return self._rooms.get(code) if code else None
