"""
EventFormatter
==============

The `event_formatter` processor formats incoming events and adds new fields as needed.

For example, here is a possible event payload:

..  code-block:: json
    :linenos:
    :caption: Incoming event payload

    {
        "high": {"celsius": "18", "fahreinheit": "64"},
        "date": {"epoch": "1357959600", "pretty": "10:00 PM EST on January 11, 2013"},
        "conditions": "Rain showers",
        "data": "This is some data"
    }

A downstream consumer might expect a :code:`message` key. The :code:`instructions` create it:

..  code-block:: yaml
    :linenos:
    :caption: Processor configuration

    - weather_formatter:
        type: event_formatter
        mode: clean
        instructions:
          message: >-
            Today's conditions look like {{ conditions }} with a high temperature of
            {{ high.celsius }} degrees Celsius.
          subject: "{{ data }}"
          created_at: "{{ created_at }}"

Names like :code:`conditions`, :code:`high` and :code:`data` refer to the fields of the event
payload. The reserved key :code:`created_at` refers to the timestamp of the event and can be
reformatted with the :code:`date` filter, like :code:`{{ created_at | date("at %I:%M %p") }}`.
The upstream agent of the event is accessible via the reserved key :code:`agent` with the
attributes :code:`id`, :code:`type`, :code:`name`, :code:`url`, :code:`disabled` and
:code:`keep_events_for`.

..  code-block:: json
    :linenos:
    :caption: Resulting event

    {
        "message": "Today's conditions look like Rain showers with a high temperature of 18 degrees Celsius.",
        "subject": "This is some data",
        "created_at": "2013-01-11 22:00:00-05:00"
    }

With :code:`matchers` values of the event can be split by regular expressions before the
instructions are rendered, see :py:mod:`eventformatter.processor.event_formatter.matcher`.

If you want to retain the original content of the events and only add new keys, set :code:`mode`
to :code:`merge`, otherwise set it to :code:`clean`. The mode is a template itself, so it can be
decided per event, e.g. :code:`"{% if keep %}merge{% else %}clean{% endif %}"`.

To escape output for urls, use the :code:`uri_escape` filter:
:code:`"https://twitter.com/search?q={{ group_by | uri_escape }}"`.

Processor Configuration
^^^^^^^^^^^^^^^^^^^^^^^

.. autoclass:: eventformatter.processor.event_formatter.processor.EventFormatter.Config
   :members:
   :undoc-members:
   :inherited-members:
   :noindex:
"""

import logging
import threading
from copy import deepcopy
from functools import cached_property
from types import MappingProxyType
from typing import Any, List, Mapping, Tuple

from attrs import define, field, validators

from eventformatter.abc.processor import Processor
from eventformatter.event import Event
from eventformatter.metrics.metrics import CounterMetric
from eventformatter.processor.base.exceptions import MatchingTimeoutError
from eventformatter.processor.event_formatter.matcher import (
    Matcher,
    create_matchers,
    run_matchers,
)
from eventformatter.util.decorators import timeout
from eventformatter.util.defaults import DEFAULT_MATCHING_TIMEOUT, MERGE_MODE
from eventformatter.util.helper import pretty_print
from eventformatter.util.template import TemplateRenderer
from eventformatter.util.validators import matchers_validator
from eventformatter.util.validators import validate_options as validate_formatter_options

logger = logging.getLogger("EventFormatter")


def event_description(instructions: Mapping, mode: str) -> str:
    """Describes the fields of the events created with the given instructions and mode"""
    mode = str(mode)
    if mode == MERGE_MODE:
        merged = ", merged with the original contents"
    elif "{" in mode:
        merged = ", conditionally merged with the original contents"
    else:
        merged = ""
    fields_ = pretty_print({key: "..." for key in instructions})
    return f"Events will have the following fields{merged}:\n\n    {fields_}"


class EventFormatter(Processor):
    """A processor that formats events by matchers and instruction templates"""

    @define(kw_only=True)
    class Config(Processor.Config):
        """Config of EventFormatter"""

        instructions: dict = field(
            validator=[
                validators.instance_of(dict),
                validators.min_len(1),
                validators.deep_mapping(
                    key_validator=validators.instance_of(str),
                    value_validator=validators.instance_of((str, dict, list, int, float, bool)),
                ),
            ]
        )
        """A mapping of output field names to templates. The templates are rendered against the
        event payload, the reserved fields :code:`created_at` and :code:`agent` and the fields
        written by the matchers. Values can be nested mappings or lists of templates."""
        mode: str = field(validator=[validators.instance_of(str), validators.min_len(1)])
        """Either :code:`clean` to create events with the rendered instructions only, or
        :code:`merge` to add the rendered instructions to a copy of the original payload.
        Rendered instruction fields replace payload fields of the same name. The mode is rendered
        as template before it is evaluated."""
        matchers: list = field(factory=list, validator=matchers_validator)
        """(Optional) A list of matchers with the keys :code:`regexp`, :code:`path` and optionally
        :code:`to`. The matchers are applied in the given order. An empty :code:`to` is the same
        as no :code:`to`, the match data is merged into the top level then."""
        matching_timeout: int = field(
            default=DEFAULT_MATCHING_TIMEOUT,
            validator=[validators.instance_of(int), validators.ge(0)],
        )
        """(Optional) Time limit in seconds for all matchers of one event. Guards against
        regular expressions with catastrophic backtracking. The limit relies on :code:`SIGALRM`
        and is only applied in the main thread. In other threads the matchers run without limit
        and a warning is logged once. Defaults to :code:`0` which disables the limit."""

    @define(kw_only=True)
    class Metrics(Processor.Metrics):
        """Statistics of the event formatter"""

        number_of_matches: CounterMetric = field(
            factory=lambda: CounterMetric(
                name="number_of_matches",
                description="Number of matchers which wrote match data into an event",
            )
        )
        """Number of matchers which wrote match data into an event"""
        number_of_misses: CounterMetric = field(
            factory=lambda: CounterMetric(
                name="number_of_misses",
                description="Number of matchers which left an event unchanged",
            )
        )
        """Number of matchers which left an event unchanged, because the regexp did not match or
        the path could not be resolved"""

    _config: "EventFormatter.Config"

    def __init__(self, name: str, configuration: "EventFormatter.Config", registry=None):
        super().__init__(name, configuration, registry)
        self._renderer = TemplateRenderer()
        self._warned_about_thread = False

    @cached_property
    def matchers(self) -> Tuple[Matcher, ...]:
        """the compiled matchers"""
        return create_matchers(self._config.matchers)

    @property
    def instructions(self) -> dict:
        """the configured instructions"""
        return self._config.instructions

    @property
    def mode(self) -> str:
        """the configured mode template"""
        return self._config.mode

    @classmethod
    def validate_options(cls, options: dict) -> List[str]:
        return validate_formatter_options(options)

    def setup(self):
        super().setup()
        logger.debug("%s compiled %d matchers", self.describe(), len(self.matchers))

    def describe_output(self) -> str:
        """Describes the fields of the created events"""
        return event_description(self._config.instructions, self._config.mode)

    def _apply(self, event: Any) -> dict:
        if not isinstance(event, Event):
            event = Event.from_dict(event)
        return self.format(event)

    def format(self, event: Event) -> dict:
        """Formats one event.

        Parameters
        ----------
        event : Event
            the event to format

        Returns
        -------
        dict
            the output event

        Raises
        ------
        RenderError
            if an instruction or the mode could not be rendered, no output is created then
        MatchingTimeoutError
            if the matchers exceeded :code:`matching_timeout`
        """
        reserved = MappingProxyType({"created_at": event.created_at, "agent": event.agent})
        enriched_payload = self._perform_matching(event.payload, reserved)
        context = MappingProxyType({**deepcopy(enriched_payload), **reserved})
        instructions = self._renderer.render_structure(self._config.instructions, context)
        mode = self._renderer.render(self._config.mode, context).strip()
        formatted_event = deepcopy(dict(event.payload)) if mode == MERGE_MODE else {}
        formatted_event.update(instructions)
        return formatted_event

    def _count_match(self, _: Matcher, matched: bool) -> None:
        if matched:
            self.metrics.number_of_matches += 1
        else:
            self.metrics.number_of_misses += 1

    def _perform_matching(self, payload: Mapping, reserved: Mapping) -> dict:
        if not self.matchers:
            return dict(payload)
        seconds = self._config.matching_timeout
        matching = run_matchers
        if seconds and threading.current_thread() is threading.main_thread():
            matching = timeout(seconds=seconds)(run_matchers)
        elif seconds and not self._warned_about_thread:
            self._warned_about_thread = True
            logger.warning(
                "%s runs outside of the main thread, matching_timeout of %d second(s) is ignored",
                self.describe(),
                seconds,
            )
        try:
            return matching(
                self.matchers,
                deepcopy(dict(payload)),
                self._renderer,
                reserved,
                self._count_match,
            )
        except TimeoutError as error:
            raise MatchingTimeoutError(seconds, self.name) from error
