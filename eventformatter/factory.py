"""Creates components from their definitions"""

import logging
from typing import Optional

from prometheus_client import CollectorRegistry

from eventformatter.abc.component import Component
from eventformatter.factory_error import (
    InvalidConfigSpecificationError,
    InvalidConfigurationError,
    InvalidConfigurationErrors,
)
from eventformatter.registry import Registry

logger = logging.getLogger("Factory")


class Factory:
    """Creates components from definitions like
    :code:`{"weather_formatter": {"type": "event_formatter", ...}}`."""

    @classmethod
    def create(
        cls, configuration: dict, registry: Optional[CollectorRegistry] = None
    ) -> Component:
        """Validates a definition with exactly one component and creates the component.

        The raw options are checked by :code:`validate_options` of the component class first,
        so that all problems are reported together. The typed configuration is created
        afterwards.

        Raises
        ------
        InvalidConfigurationError
            if the definition is malformed, :code:`InvalidConfigurationErrors` with every
            problem if the options are invalid
        """
        if configuration is None or configuration == {}:
            raise InvalidConfigurationError("No component is defined.")
        if not isinstance(configuration, dict):
            raise InvalidConfigSpecificationError()
        if len(configuration) != 1:
            names = ", ".join(map(str, configuration))
            raise InvalidConfigurationError(
                f"Exactly one component has to be defined, found: {names}"
            )
        ((name, definition),) = configuration.items()
        if definition is None:
            raise InvalidConfigurationError(f"The options of component '{name}' are empty.")
        if not isinstance(definition, dict):
            raise InvalidConfigSpecificationError(name)
        component_class = Registry.get_class(name, definition)
        options = {key: value for key, value in definition.items() if key != "type"}
        errors = component_class.validate_options(options)
        if errors:
            raise InvalidConfigurationErrors([f"{name}: {error}" for error in errors])
        try:
            config = Registry.create_config(name, definition)
        except (TypeError, ValueError) as error:
            raise InvalidConfigurationError(
                f"Invalid options for component '{name}': {error}"
            ) from error
        logger.debug("Creating %s '%s'", definition["type"], name)
        return component_class(name, config, registry)
