"""
Metrics
=======

eventformatter counts formatted events, failed events and matcher results with the
`prometheus python client <https://github.com/prometheus/client_python>`_. All metric names
are prefixed with :code:`eventformatter_`, e.g.
:code:`eventformatter_number_of_processed_events_total` or
:code:`eventformatter_processing_time_per_event_sum`.

The metrics of a formatter are registered in the :code:`CollectorRegistry` the formatter was
created with. Without a registry they are counted but not exported. Every metric carries the
labels :code:`component`, :code:`description`, :code:`type` and :code:`name` of its formatter,
so two formatters with the same name can not share a registry.

.. autoclass:: eventformatter.processor.event_formatter.processor.EventFormatter.Metrics
   :members:
   :undoc-members:
   :noindex:
"""

from abc import ABC, abstractmethod
from functools import wraps
from typing import Any, Optional

from attrs import define, field, validators
from prometheus_client import CollectorRegistry, Counter, Histogram

METRIC_PREFIX = "eventformatter_"

PROCESSING_TIME_BUCKETS = (0.00001, 0.00005, 0.0001, 0.0005, 0.001, 0.01, 0.1, 1)


@define(kw_only=True, slots=False)
class Metric(ABC):
    """A named statistic of a component. It can be used after :meth:`bind`."""

    name: str = field(validator=validators.instance_of(str))
    description: str = field(validator=validators.instance_of(str))
    labels: dict = field(factory=dict, validator=validators.instance_of(dict))
    tracker: Any = field(init=False, default=None)
    """The labeled prometheus child the values are recorded in"""

    def bind(self, labels: dict, registry: Optional[CollectorRegistry] = None) -> None:
        """Creates the collector in the registry and selects the child for the labels."""
        self.labels = dict(labels)
        collector = self._create_collector(METRIC_PREFIX + self.name, list(labels), registry)
        self.tracker = collector.labels(**self.labels)

    @abstractmethod
    def _create_collector(self, name: str, labelnames: list, registry):
        """returns the unlabeled prometheus collector"""

    @abstractmethod
    def __add__(self, other): ...

    @staticmethod
    def measure_time(metric_name: str = "processing_time_per_event"):
        """Records the duration of the decorated method in the histogram :code:`metric_name` of
        the metrics of its component."""

        def decorator(func):
            @wraps(func)
            def inner(self, *args, **kwargs):  # nosemgrep
                with getattr(self.metrics, metric_name).tracker.time():
                    return func(self, *args, **kwargs)

            return inner

        return decorator


@define(kw_only=True)
class CounterMetric(Metric):
    """Counts occurrences, :code:`metric += 1`"""

    def _create_collector(self, name, labelnames, registry):
        return Counter(name, self.description, labelnames=labelnames, registry=registry)

    def __add__(self, other: Any) -> "CounterMetric":
        self.tracker.inc(other)
        return self


@define(kw_only=True)
class HistogramMetric(Metric):
    """Observes durations in seconds, :code:`metric += 0.002`"""

    def _create_collector(self, name, labelnames, registry):
        return Histogram(
            name,
            self.description,
            labelnames=labelnames,
            buckets=PROCESSING_TIME_BUCKETS,
            registry=registry,
        )

    def __add__(self, other: Any) -> "HistogramMetric":
        self.tracker.observe(other)
        return self
