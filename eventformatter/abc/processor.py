"""Base class of components which turn one incoming event into output events"""

import logging
from abc import abstractmethod
from typing import Any, Iterable, List

from attrs import define, field, validators

from eventformatter.abc.component import Component
from eventformatter.metrics.metrics import CounterMetric, HistogramMetric, Metric
from eventformatter.processor.base.exceptions import ProcessingCriticalError, ProcessingError

logger = logging.getLogger("Processor")


@define(kw_only=True)
class ProcessorResult:
    """Outcome of processing a single event. Either :code:`data` holds the output events or
    :code:`errors` holds the reason why there are none."""

    processor_name: str = field(validator=validators.instance_of(str))
    """name of the processor which created the result"""
    event: Any = field(default=None)
    """the incoming event"""
    data: list = field(factory=list, validator=validators.instance_of(list))
    """the output events"""
    errors: list = field(
        factory=list,
        validator=validators.deep_iterable(
            member_validator=validators.instance_of(ProcessingError),
            iterable_validator=validators.instance_of(list),
        ),
    )
    """the processing errors, an event with errors has no output"""


class Processor(Component):
    """A component that creates output events from incoming events. Subclasses implement
    :meth:`_apply` for a single event and raise :code:`ProcessingCriticalError` if an event can
    not be processed."""

    @define(kw_only=True)
    class Metrics(Component.Metrics):
        """Statistics of every processor"""

        number_of_processed_events: CounterMetric = field(
            factory=lambda: CounterMetric(
                name="number_of_processed_events",
                description="Number of incoming events, including the failed ones",
            )
        )
        """Number of incoming events, including the failed ones"""
        number_of_errors: CounterMetric = field(
            factory=lambda: CounterMetric(
                name="number_of_errors",
                description="Number of incoming events which produced no output",
            )
        )
        """Number of incoming events which produced no output"""
        processing_time_per_event: HistogramMetric = field(
            factory=lambda: HistogramMetric(
                name="processing_time_per_event",
                description="Seconds spent on a single incoming event",
            )
        )
        """Seconds spent on a single incoming event"""

    @property
    def metric_labels(self) -> dict:
        return super().metric_labels | {
            "component": "processor",
            "description": self.describe(),
            "type": self._config.type,
        }

    @Metric.measure_time()
    def process(self, event: Any) -> ProcessorResult:
        """Processes one event. Errors are returned in the result instead of being raised, so a
        failing event never affects the next one.

        Parameters
        ----------
        event : Any
           the incoming event

        Returns
        -------
        ProcessorResult
            the output events or the errors of the event
        """
        result = ProcessorResult(processor_name=self.name, event=event)
        try:
            result.data.append(self._apply(event))
        except ProcessingCriticalError as error:
            result.errors.append(error)
        except Exception as error:  # pylint: disable=broad-except
            result.errors.append(ProcessingCriticalError(str(error), self.name))
        self.metrics.number_of_processed_events += 1
        if result.errors:
            self.metrics.number_of_errors += 1
        return result

    def receive(self, events: Iterable[Any]) -> List[Any]:
        """Processes the events in the given order and logs the errors of failing events.

        Returns
        -------
        list
            the output events of all successfully processed events
        """
        outputs = []
        for event in events:
            result = self.process(event)
            for error in result.errors:
                logger.error("%s could not process event: %s", self.describe(), error)
            outputs += result.data
        return outputs

    @abstractmethod
    def _apply(self, event: Any) -> Any:
        """returns the output event of one incoming event"""
