"""
Templates
=========

Instructions, matcher paths and the output mode are rendered with
`jinja2 <https://jinja.palletsprojects.com/>`_ templates against the interpolation context of an
event. Fields are accessed by dotted paths, e.g. :code:`{{ high.celsius }}`. Numeric keys as they
are written by matchers can be addressed the same way: :code:`{{ pretty_date.1 }}`.
Missing fields and :code:`null` values render as empty strings, booleans as :code:`true` and
:code:`false`.

Besides the builtin jinja2 filters the following filters are available:

:code:`date`
    Formats a :code:`datetime`, an ISO-8601 string or a unix epoch with a
    :code:`strftime` format string, e.g. :code:`{{ created_at | date("at %I:%M %p") }}`.
    Values that can not be interpreted as a point in time are returned unchanged.

:code:`uri_escape`
    Escapes a value for use in an url query, e.g. :code:`{{ group_by | uri_escape }}`.
"""

import logging
from collections.abc import Mapping
from datetime import datetime, timezone
from functools import lru_cache
from typing import Any, Callable, Optional
from urllib.parse import quote_plus

from jinja2 import ChainableUndefined, StrictUndefined, Template, TemplateError, UndefinedError
from jinja2.sandbox import SandboxedEnvironment

from eventformatter.processor.base.exceptions import RenderError

logger = logging.getLogger("Template")

DEFAULT_DATE_FORMAT = "%Y-%m-%dT%H:%M:%S%z"


def _to_datetime(value: Any) -> Optional[datetime]:
    if isinstance(value, datetime):
        return value
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        return datetime.fromtimestamp(value, tz=timezone.utc)
    if not isinstance(value, str):
        return None
    value = value.strip()
    if value == "now":
        return datetime.now(timezone.utc)
    if value.isdigit():
        return datetime.fromtimestamp(int(value), tz=timezone.utc)
    try:
        return datetime.fromisoformat(value)
    except ValueError:
        return None


def date(value: Any, format_string: str = DEFAULT_DATE_FORMAT) -> Any:
    """formats a point in time with a strftime format string"""
    if value is None or value == "":
        return ""
    moment = _to_datetime(value)
    if moment is None:
        return value
    return moment.strftime(format_string)


def uri_escape(value: Any) -> str:
    """escapes a value for usage in urls, spaces are encoded as :code:`+`"""
    if value is None:
        return ""
    return quote_plus(str(value))


def finalize(value: Any) -> Any:
    """Renders JSON values the way they are written in JSON: :code:`null` as empty string and
    booleans as :code:`true` or :code:`false`."""
    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    return value


DEFAULT_FILTERS: dict = {"date": date, "uri_escape": uri_escape}


class _ContextEnvironment(SandboxedEnvironment):
    """Sandboxed environment which resolves :code:`{{ field.0 }}` against the string key
    :code:`"0"` of a mapping."""

    def getitem(self, obj, argument):
        if (
            isinstance(argument, int)
            and not isinstance(argument, bool)
            and isinstance(obj, Mapping)
            and str(argument) in obj
        ):
            return obj[str(argument)]
        return super().getitem(obj, argument)


class TemplateRenderer:
    """Renders template strings against a context.

    Undefined fields render as empty strings with :meth:`render`. :meth:`resolve` instead reports
    undefined fields by returning :code:`None`.
    """

    __slots__ = ["_compile", "_compile_strict", "_environment"]

    def __init__(self, filters: Optional[Mapping[str, Callable]] = None, cache_size: int = 1024):
        filters = DEFAULT_FILTERS | dict(filters or {})
        self._environment = _ContextEnvironment(undefined=ChainableUndefined, finalize=finalize)
        strict_environment = _ContextEnvironment(undefined=StrictUndefined, finalize=finalize)
        for environment in (self._environment, strict_environment):
            environment.filters.update(filters)
        self._compile = lru_cache(maxsize=cache_size)(self._environment.from_string)
        self._compile_strict = lru_cache(maxsize=cache_size)(strict_environment.from_string)

    def syntax_error(self, template: str) -> Optional[str]:
        """Returns a description of the first syntax error in the template or :code:`None`.
        Unknown filters are reported as syntax errors as well."""
        try:
            self._compile(template)
        except TemplateError as error:
            return str(error)
        return None

    def render(self, template: str, context: Mapping) -> str:
        """Renders a template string against the given context.

        Raises
        ------
        RenderError
            if the template is invalid or rendering fails
        """
        return self._render(self._compile, template, context)

    def resolve(self, template: str, context: Mapping) -> Optional[str]:
        """Renders a template string, but returns :code:`None` if the template refers to a field
        which is not present in the context."""
        try:
            return self._render(self._compile_strict, template, context)
        except RenderError as error:
            if isinstance(error.__cause__, UndefinedError):
                return None
            raise

    def render_structure(self, value: Any, context: Mapping) -> Any:
        """Renders all strings of a nested structure of mappings and lists. Other values are
        returned as they are."""
        if isinstance(value, str):
            return self.render(value, context)
        if isinstance(value, Mapping):
            return {key: self.render_structure(item, context) for key, item in value.items()}
        if isinstance(value, list):
            return [self.render_structure(item, context) for item in value]
        return value

    @staticmethod
    def _render(compile_: Callable[[str], Template], template: str, context: Mapping) -> str:
        try:
            return compile_(template).render(context)
        except Exception as error:  # pylint: disable=broad-except
            raise RenderError(template, str(error)) from error
