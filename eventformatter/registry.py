"""Maps the :code:`type` of a component definition to its class.
New component types are added to :code:`Registry.mapping`.
"""

from typing import Any, Dict, Mapping, Type

from eventformatter.abc.component import Component
from eventformatter.factory_error import NoTypeSpecifiedError, UnknownComponentTypeError
from eventformatter.processor.event_formatter.processor import EventFormatter


class Registry:
    """Known component types"""

    mapping: Dict[str, Type[Component]] = {
        "event_formatter": EventFormatter,
    }

    @classmethod
    def get_class(cls, name: str, definition: Mapping[str, Any]) -> Type[Component]:
        """Looks up the class of a component definition.

        Raises
        ------
        NoTypeSpecifiedError
            if the definition has no :code:`type`
        UnknownComponentTypeError
            if the :code:`type` is not registered
        """
        if "type" not in definition:
            raise NoTypeSpecifiedError(name)
        component_type = definition["type"]
        if not isinstance(component_type, str) or component_type not in cls.mapping:
            raise UnknownComponentTypeError(name, component_type, cls.mapping)
        return cls.mapping[component_type]

    @classmethod
    def create_config(cls, name: str, definition: Mapping[str, Any]) -> Component.Config:
        """Builds the typed configuration of a component definition. The attrs validators of
        the configuration raise :code:`TypeError` or :code:`ValueError` for invalid options."""
        return cls.get_class(name, definition).Config(**definition)
