"""Error taxonomy for quiz room events.

Each error knows which event it is reported on and whether it is reported
at all. The Socket.IO gateway turns raised errors into a frame for the
originating connection only.
"""


class QuizError(Exception):
    code = 'QUIZ_ERROR'
    event = 'join-error'
    message = 'Something went wrong'
    # Silent errors are logged but never sent to the client
    silent = False

    def __init__(self, message=None):
        self.message = message or self.message
        super().__init__(self.message)

    def to_dict(self):
        return {'message': self.message, 'code': self.code}


class InvalidRoomCode(QuizError):
    code = 'INVALID_ROOM_CODE'
    message = 'Room code must be 4-6 characters (letters and numbers only)'


class RoomCodeTaken(QuizError):
    code = 'ROOM_CODE_TAKEN'
    message = 'This room code is already taken. Please choose a different one.'


class RoomNotFound(QuizError):
    code = 'ROOM_NOT_FOUND'
    message = 'Room not found'


class GameInProgress(QuizError):
    code = 'GAME_IN_PROGRESS'
    message = 'Game already in progress'


class NoValidQuestions(QuizError):
    code = 'NO_VALID_QUESTIONS'
    message = 'At least one question with text, 4 options and a correct answer is required'


class AlreadyInRoom(QuizError):
    code = 'ALREADY_IN_ROOM'
    message = 'This connection already belongs to a room'


class NotEnoughPlayers(QuizError):
    code = 'NOT_ENOUGH_PLAYERS'
    event = 'quiz-error'
    message = 'At least one player must join before the quiz can start'


class AlreadyAnswered(QuizError):
    code = 'ALREADY_ANSWERED'
    event = 'quiz-error'
    message = 'You already answered this question'


class Unauthorized(QuizError):
    """A non-host connection tried a host-only action.

    Deliberately silent: the action is dropped without an error frame.
    """

    code = 'UNAUTHORIZED'
    event = 'quiz-error'
    message = 'Only the host can do that'
    silent = True
