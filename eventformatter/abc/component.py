"""Base class of everything the factory creates"""

import functools
import inspect
from abc import ABC
from functools import cached_property
from typing import List, Optional

from attrs import define, field, fields, validators
from prometheus_client import CollectorRegistry

from eventformatter.metrics.metrics import Metric
from eventformatter.util.helper import camel_to_snake


class Component(ABC):
    """A named, configured unit. Subclasses extend :code:`Config` with their options and
    :code:`Metrics` with their statistics."""

    @define(kw_only=True, slots=False, frozen=True)
    class Config:
        """Options shared by all components. Configurations are read only once created."""

        type: str = field(validator=validators.instance_of(str))
        """The registered type of the component, e.g. :code:`event_formatter`"""

    @define(kw_only=True)
    class Metrics:
        """The statistics of a component. Every attribute holding a :code:`Metric` is bound to
        the labels of the component."""

        def bind(self, labels: dict, registry: Optional[CollectorRegistry] = None):
            """binds all metrics and returns the bound metrics object"""
            for attribute in fields(type(self)):
                metric = getattr(self, attribute.name)
                if isinstance(metric, Metric):
                    metric.bind(labels, registry)
            return self

    # __dict__ keeps functools.cached_property working next to __slots__
    __slots__ = ["name", "_config", "_registry", "__dict__"]

    name: str
    _config: Config
    _registry: Optional[CollectorRegistry]

    def __init__(
        self,
        name: str,
        configuration: "Component.Config",
        registry: Optional[CollectorRegistry] = None,
    ):
        self.name = name
        self._config = configuration
        self._registry = registry

    def __repr__(self):
        return camel_to_snake(self.__class__.__name__)

    @property
    def metric_labels(self) -> dict:
        """the labels attached to every metric of the component"""
        return {"component": self._config.type, "description": "", "type": "", "name": self.name}

    @cached_property
    def metrics(self):
        """the bound metrics of the component"""
        return self.Metrics().bind(self.metric_labels, self._registry)

    @classmethod
    def validate_options(cls, options: dict) -> List[str]:  # pylint: disable=unused-argument
        """Checks the raw options before the configuration is created. Components with options
        that can not be expressed by attrs validators override it.

        Returns
        -------
        list[str]
            all found errors, an empty list if the options are valid
        """
        return []

    def describe(self) -> str:
        """Names the component by class and configured name, e.g.
        :code:`EventFormatter (weather_formatter)`."""
        return f"{self.__class__.__name__} ({self.name})"

    def setup(self):
        """Prepares the component before the first event, all cached properties are created."""
        for name, member in inspect.getmembers(type(self)):
            if isinstance(member, functools.cached_property):
                getattr(self, name)

    def shut_down(self):
        """Releases what :meth:`setup` created. The metrics stay registered."""
        for name, member in inspect.getmembers(type(self)):
            if isinstance(member, functools.cached_property) and name != "metrics":
                self.__dict__.pop(name, None)
