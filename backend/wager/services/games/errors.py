class GameError(Exception):
    """Base class for failures scoped to a single attempted mutation."""
    status_code = 400


class ValidationFailed(GameError):
    status_code = 400


class EmptyQuestionBank(ValidationFailed):
    def __init__(self, message='The question bank is empty'):
        super().__init__(message)


class NotHost(GameError):
    status_code = 403

    def __init__(self, message='Only the host may do that'):
        super().__init__(message)


class NoActiveGame(GameError):
    status_code = 404

    def __init__(self, message='No game has been started'):
        super().__init__(message)


class TransactionAborted(GameError):
    """Conflicts persisted past the retry budget; safe to retry."""
    status_code = 503
