"""abstract module for exceptions"""


class EventFormatterException(Exception):
    """Base class for eventformatter related exceptions."""

    def __init__(self, message: str, *args) -> None:
        self.message = message
        super().__init__(message, *args)

    def __eq__(self, other: object) -> bool:
        if isinstance(other, EventFormatterException):
            return self.args == other.args
        return NotImplemented

    def __hash__(self) -> int:
        return hash(self.args)
