"""
Matchers
========

A matcher performs a regular expression match against a value of the event and expands the
match data into the event, so that it can be used by the instructions.

..  code-block:: yaml
    :linenos:
    :caption: Example matcher configuration

    matchers:
      - path: "{{ date.pretty }}"
        regexp: '^(?P<time>\\d\\d:\\d\\d [AP]M [A-Z]+)'
        to: pretty_date

The :code:`path` is a template which is rendered against the event. The :code:`regexp` is searched
in the rendered value. The whole match is written as key :code:`"0"`, every group by its number and
every named group additionally by its name:

..  code-block:: json
    :linenos:
    :caption: Fields added by the example matcher

    {
        "pretty_date": {
            "0": "10:00 PM EST",
            "1": "10:00 PM EST",
            "time": "10:00 PM EST"
        }
    }

If :code:`to` is omitted or empty, the match data is merged into the top level of the event.
The path sees the reserved fields :code:`created_at` and :code:`agent` with the same values as
the instructions, even if the event has fields of the same name.
Matchers are applied in the configured order, so every matcher sees the fields written by the
matchers before it.
"""

import logging
import re
from collections import ChainMap
from functools import reduce
from typing import Callable, Dict, Iterable, List, Mapping, Optional, Tuple

from attrs import define, field, validators

from eventformatter.processor.base.exceptions import RenderError
from eventformatter.util.template import TemplateRenderer

logger = logging.getLogger("Matcher")


@define(kw_only=True, frozen=True)
class MatchData:
    """The groups of a successful match"""

    matches: Tuple[Optional[str], ...] = field(converter=tuple)
    """All groups in order, starting with the whole match"""
    named_matches: Mapping[str, Optional[str]] = field(factory=dict, converter=dict)
    """The named groups"""

    @classmethod
    def from_match(cls, match: re.Match) -> "MatchData":
        """Creates the match data of a :code:`re.Match`"""
        return cls(matches=(match.group(0), *match.groups()), named_matches=match.groupdict())

    def as_dict(self) -> Dict[str, Optional[str]]:
        """Flattens the match data. Groups are keyed by their number as string, named groups are
        additionally keyed by their name."""
        flat = {str(index): value for index, value in enumerate(self.matches)}
        flat.update(self.named_matches)
        return flat


def _compile(regexp):
    return regexp if isinstance(regexp, re.Pattern) else re.compile(regexp)


@define(kw_only=True, frozen=True)
class Matcher:
    """A compiled matcher. Matchers hold no state and can be shared between threads."""

    regexp: re.Pattern = field(converter=_compile)
    """The regular expression which is searched in the resolved path"""
    path: str = field(validator=[validators.instance_of(str), validators.min_len(1)])
    """Template of the value to match against"""
    to: Optional[str] = field(
        default=None, validator=validators.optional(validators.instance_of(str))
    )
    """Field to write the match data to. If not set, the match data is merged into the event."""

    @classmethod
    def from_dict(cls, matcher: Mapping) -> "Matcher":
        """Creates a matcher from its configuration. An empty :code:`to` is treated as unset,
        so the match data is merged into the top level of the event."""
        return cls(regexp=matcher["regexp"], path=matcher["path"], to=matcher.get("to") or None)

    def match(
        self, event: Mapping, renderer: TemplateRenderer, reserved: Optional[Mapping] = None
    ) -> Optional[MatchData]:
        """Resolves the path against the event and searches the regexp in it.

        Parameters
        ----------
        event : Mapping
            the event the path is resolved against
        renderer : TemplateRenderer
            the renderer to resolve the path with
        reserved : Mapping, optional
            fields like :code:`created_at` and :code:`agent`, they take precedence over event
            fields of the same name

        Returns
        -------
        MatchData or None
            the match data or :code:`None` if the path could not be resolved to a string or the
            regexp did not match
        """
        context = event if reserved is None else ChainMap(reserved, event)
        try:
            value = renderer.resolve(self.path, context)
        except RenderError as error:
            logger.warning("skipped matcher %s: %s", self, error)
            return None
        if not isinstance(value, str):
            logger.debug("skipped matcher %s: path is not resolvable", self)
            return None
        match = self.regexp.search(value)
        if match is None:
            return None
        return MatchData.from_match(match)

    def inject(self, event: Mapping, match_data: Optional[MatchData]) -> dict:
        """Returns a copy of the event with the match data added. Without match data the copy
        is unchanged."""
        result = dict(event)
        if match_data is None:
            return result
        captures = match_data.as_dict()
        if self.to is None:
            result.update(captures)
            return result
        current = result.get(self.to)
        if isinstance(current, Mapping):
            result[self.to] = {**current, **captures}
        else:
            result[self.to] = captures
        return result

    def apply(
        self, event: Mapping, renderer: TemplateRenderer, reserved: Optional[Mapping] = None
    ) -> dict:
        """Returns a copy of the event with the match data of this matcher added."""
        return self.inject(event, self.match(event, renderer, reserved))

    def __str__(self) -> str:
        return f"regexp={self.regexp.pattern!r}, path={self.path!r}, to={self.to!r}"


def run_matchers(
    matchers: Iterable[Matcher],
    payload: Mapping,
    renderer: TemplateRenderer,
    reserved: Optional[Mapping] = None,
    on_match: Optional[Callable[[Matcher, bool], None]] = None,
) -> dict:
    """Applies the matchers from left to right. Each matcher gets the result of its predecessor.
    Without matchers a copy of the payload is returned.

    :code:`on_match` is called with every matcher and whether it matched.
    """

    def step(event: Mapping, matcher: Matcher) -> dict:
        match_data = matcher.match(event, renderer, reserved)
        if on_match is not None:
            on_match(matcher, match_data is not None)
        return matcher.inject(event, match_data)

    return reduce(step, matchers, dict(payload))


def create_matchers(matchers: Optional[List[Mapping]]) -> Tuple[Matcher, ...]:
    """compiles matcher configurations"""
    return tuple(Matcher.from_dict(matcher) for matcher in matchers or ())
