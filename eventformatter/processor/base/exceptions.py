"""This module contains exceptions for processing events."""

from eventformatter.abc.exceptions import EventFormatterException


class ProcessingError(EventFormatterException):
    """Base class for exceptions related to processing events."""

    def __init__(self, message: str, processor_name: str = ""):
        self.processor_name = processor_name
        super().__init__(f"{self.__class__.__name__}: {message}")


class ProcessingCriticalError(ProcessingError):
    """A critical error occurred - stop processing of this event"""

    def __init__(self, message: str, processor_name: str = ""):
        message = f"'{message}'"
        if processor_name:
            message += f" -> processor: '{processor_name}'"
        full_message = f"{message} -> event was dropped and further processing stopped"
        super().__init__(full_message, processor_name)


class RenderError(ProcessingCriticalError):
    """Raise if a template could not be rendered against an event."""

    def __init__(self, template: str, reason: str, processor_name: str = ""):
        self.template = template
        super().__init__(f"could not render template {template!r}: {reason}", processor_name)


class MatchingTimeoutError(ProcessingCriticalError):
    """Raise if the matchers of one event exceeded the configured time limit."""

    def __init__(self, seconds: int, processor_name: str = ""):
        self.seconds = seconds
        super().__init__(
            f"matchers timed out after {seconds} second(s), a regexp might be too complex",
            processor_name,
        )
