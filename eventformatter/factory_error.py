"""Errors raised while a component is created from its definition"""

from typing import Iterable, List

from eventformatter.abc.exceptions import EventFormatterException


class FactoryError(EventFormatterException):
    """A component could not be created"""


class InvalidConfigurationError(FactoryError):
    """A definition or configuration file is not valid. Raised before any event is processed."""


class InvalidConfigurationErrors(InvalidConfigurationError):
    """Carries every problem found in a configuration, one per line."""

    errors: List[InvalidConfigurationError]

    def __init__(self, errors: Iterable[Exception | str]) -> None:
        self.errors = []
        for error in errors:
            if not isinstance(error, InvalidConfigurationError):
                error = InvalidConfigurationError(str(error))
            if error not in self.errors:
                self.errors.append(error)
        super().__init__("\n".join(str(error) for error in self.errors))


class InvalidConfigSpecificationError(InvalidConfigurationError):
    """A definition is not a mapping"""

    def __init__(self, component: str | None = None):
        if component is None:
            super().__init__("The formatter definition has to be a mapping of name to options.")
        else:
            super().__init__(f"The options of component '{component}' have to be a mapping.")


class NoTypeSpecifiedError(InvalidConfigurationError):
    """A definition has no :code:`type`"""

    def __init__(self, name: str | None = None):
        subject = f"component '{name}'" if name else "a component"
        super().__init__(f"The option 'type' is missing for {subject}.")


class UnknownComponentTypeError(InvalidConfigurationError):
    """A definition has a :code:`type` that is not registered"""

    def __init__(self, component_name: str, component_type, known_types: Iterable[str] = ()):
        message = f"Unknown type '{component_type}' for component '{component_name}'"
        known_types = sorted(known_types)
        if known_types:
            message += f", known types: {', '.join(known_types)}"
        super().__init__(message)
