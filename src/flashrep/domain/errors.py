"""Exception taxonomy for flashrep."""


class FlashrepError(Exception):
    """Base class for every error raised by flashrep."""


class InvalidQualityError(FlashrepError, ValueError):
    """A quality rating outside the 1-5 scale reached the calling boundary."""

    def __init__(self, value: object):
        self.value = value
        super().__init__(f"Quality must be an integer between 1 and 5, got {value!r}")


class AnalyticsUnavailableError(FlashrepError):
    """The analytics sink could not be reached or rejected the call."""


class SessionAlreadyActiveError(FlashrepError):
    """start_session was called on a tracker that already owns a session."""


class CardNotFoundError(FlashrepError, KeyError):
    """No card with the given id is present in the review queue."""

    def __str__(self) -> str:
        return f"Card not found in queue: {self.args[0]!r}"


class DeckFileError(FlashrepError):
    """A deck file could not be read or does not have the expected shape."""
