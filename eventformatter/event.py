"""
Events
======

An event consists of its :code:`payload`, the time it was created at and a descriptor of the
upstream agent which produced it. Events are read only, the formatter never changes them.

..  code-block:: json
    :linenos:
    :caption: Example of an event in its dict representation

    {
        "payload": {"conditions": "Rain showers", "high": {"celsius": "18"}},
        "created_at": "2013-01-11T22:00:00-05:00",
        "agent": {"id": 3, "type": "WeatherAgent", "name": "Weather"}
    }
"""

from datetime import datetime, timezone
from types import MappingProxyType
from typing import Any, Mapping, Optional, Tuple

from attrs import asdict, define, field, fields, validators


def _to_created_at(value: Any) -> datetime:
    if value is None:
        return datetime.now(timezone.utc)
    if isinstance(value, datetime):
        return value
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return datetime.fromtimestamp(value, tz=timezone.utc)
    if isinstance(value, str):
        return datetime.fromisoformat(value)
    raise TypeError(f"created_at has to be a datetime, an iso formatted str or an epoch: {value}")


@define(kw_only=True, frozen=True)
class AgentDescriptor:
    """Read only view on the upstream agent of an event. It is exposed to templates under the
    reserved key :code:`agent`, e.g. :code:`{{ agent.type }}`."""

    id: Optional[int | str] = field(
        default=None, validator=validators.optional(validators.instance_of((int, str)))
    )
    """The identifier of the agent"""
    type: str = field(default="", validator=validators.instance_of(str))
    """The type of the agent"""
    name: str = field(default="", validator=validators.instance_of(str))
    """The name of the agent"""
    url: str = field(default="", validator=validators.instance_of(str))
    """The url of the agent"""
    disabled: bool = field(default=False, validator=validators.instance_of(bool))
    """Whether the agent is disabled"""
    keep_events_for: int = field(default=0, validator=validators.instance_of(int))
    """The retention time of the events of the agent in seconds"""

    @classmethod
    def attribute_names(cls) -> Tuple[str, ...]:
        """The names of all attributes which can be used in templates"""
        return tuple(attribute.name for attribute in fields(cls))

    @classmethod
    def from_dict(cls, agent: Optional[Mapping]) -> "AgentDescriptor":
        """Creates a descriptor from a mapping. Unknown keys are ignored."""
        if agent is None:
            return cls()
        known = cls.attribute_names()
        return cls(**{key: value for key, value in agent.items() if key in known})

    def as_dict(self) -> dict:
        """returns the attributes as dict"""
        return asdict(self)


@define(kw_only=True, frozen=True)
class Event:
    """An incoming event"""

    payload: Mapping = field(
        validator=validators.instance_of(Mapping),
        converter=lambda value: MappingProxyType(dict(value)),
    )
    """The content of the event. Stored as read only mapping."""
    created_at: datetime = field(
        factory=lambda: datetime.now(timezone.utc), converter=_to_created_at
    )
    """The time the event was created at"""
    agent: AgentDescriptor = field(
        factory=AgentDescriptor, validator=validators.instance_of(AgentDescriptor)
    )
    """The upstream agent which produced the event"""

    @classmethod
    def from_dict(cls, event: Mapping) -> "Event":
        """Creates an event from its dict representation.

        A mapping with a :code:`payload` mapping is an event with the optional keys
        :code:`created_at` and :code:`agent`. Its other keys are ignored, so a payload that has
        a :code:`payload` mapping itself has to be wrapped as :code:`{"payload": {...}}`.
        Any other mapping is treated as the payload of an event which was created now.
        """
        if not isinstance(event.get("payload"), Mapping):
            return cls(payload=event)
        return cls(
            payload=event["payload"],
            created_at=event.get("created_at"),
            agent=AgentDescriptor.from_dict(event.get("agent")),
        )
