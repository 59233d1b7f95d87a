from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple


@dataclass
class Message:
    """An outbound event. `to` is a connection id (unicast) or a room code."""

    event: str
    payload: Dict[str, Any]
    to: str


@dataclass
class Outcome:
    """Everything a handler wants published once the registry lock is released."""

    messages: List[Message] = field(default_factory=list)
    # Room the originating connection should join
    join_group: Optional[str] = None
    # Room whose broadcast group is closed after the messages go out
    close_group: Optional[str] = None
    # (room code, question index, seconds) to arm an auto-advance timer
    timer: Optional[Tuple[str, int, int]] = None
    # Room whose pending timer should be dropped
    cancel_timer: Optional[str] = None

    def send(self, event, payload, to) -> 'Outcome':
        self.messages.append(Message(event, payload, to))
        return self

    def events(self, to=None) -> List[str]:
        return [m.event for m in self.messages if to is None or m.to == to]

    def first(self, event) -> Optional[Message]:
        for message in self.messages:
            if message.event == event:
                return message
        return None
