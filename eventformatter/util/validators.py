""" validators for the formatter configuration and to use with `attrs` fields"""

import re
from collections.abc import Mapping
from typing import Any, List, Optional

from eventformatter.factory_error import InvalidConfigurationError, InvalidConfigurationErrors
from eventformatter.util.template import TemplateRenderer


def _is_present(value: Any) -> bool:
    if value is None:
        return False
    if isinstance(value, str):
        return bool(value.strip())
    if isinstance(value, (Mapping, list, tuple)):
        return bool(value)
    return True


def _template_errors(name: str, value: Any, renderer: TemplateRenderer) -> List[str]:
    if isinstance(value, str):
        error = renderer.syntax_error(value)
        return [f"{name} has an error with templating: {error}"] if error else []
    if isinstance(value, Mapping):
        errors = []
        for key, item in value.items():
            errors += _template_errors(f"{name}.{key}", item, renderer)
        return errors
    if isinstance(value, list):
        errors = []
        for index, item in enumerate(value):
            errors += _template_errors(f"{name}.{index}", item, renderer)
        return errors
    return []


def matcher_errors(matchers: Any, renderer: Optional[TemplateRenderer] = None) -> List[str]:
    """Returns the errors of a matchers configuration.

    Parameters
    ----------
    matchers : Any
        the configured matchers
    renderer : TemplateRenderer, optional
        if given, the path templates are checked for syntax errors

    Returns
    -------
    list[str]
        all found errors, an empty list for valid matchers
    """
    if matchers is None:
        return []
    if not isinstance(matchers, list):
        return ["matchers must be an array if present"]
    errors = []
    for index, matcher in enumerate(matchers):
        if not isinstance(matcher, Mapping):
            errors.append("each matcher must be a hash")
            continue
        regexp, path, to = (matcher.get(key) for key in ("regexp", "path", "to"))
        if isinstance(regexp, str) and _is_present(regexp):
            try:
                re.compile(regexp)
            except re.error:
                errors.append(f"bad regexp found in matchers: {regexp}")
        else:
            errors.append("regexp is mandatory for a matcher and must be a string")
        if not isinstance(path, str) or not _is_present(path):
            errors.append("path is mandatory for a matcher and must be a string")
        elif renderer is not None:
            errors += _template_errors(f"matchers.{index}.path", path, renderer)
        if _is_present(to) and not isinstance(to, str):
            errors.append("to must be a string if present in a matcher")
    return errors


def validate_options(options: Mapping, renderer: Optional[TemplateRenderer] = None) -> List[str]:
    """Validates the options of an event formatter. All violations are collected.

    Parameters
    ----------
    options : Mapping
        the options with the keys :code:`instructions`, :code:`mode` and :code:`matchers`
    renderer : TemplateRenderer, optional
        the renderer to check the templates with, defaults to a renderer with the default filters

    Returns
    -------
    list[str]
        the error messages, an empty list means the options are valid
    """
    if not isinstance(options, Mapping):
        return ["options must be a hash"]
    renderer = renderer if renderer is not None else TemplateRenderer()
    errors = []
    instructions, mode = options.get("instructions"), options.get("mode")
    if not (_is_present(instructions) and _is_present(mode)):
        errors.append("instructions and mode need to be present.")
    if _is_present(instructions):
        if isinstance(instructions, Mapping):
            errors += _template_errors("instructions", instructions, renderer)
        else:
            errors.append("instructions must be a hash")
    if _is_present(mode):
        if isinstance(mode, str):
            errors += _template_errors("mode", mode, renderer)
        else:
            errors.append("mode must be a string")
    errors += matcher_errors(options.get("matchers"), renderer)
    return errors


def matchers_validator(_, __, value):
    """validate the matchers of a configuration"""
    errors = matcher_errors(value)
    if errors:
        raise InvalidConfigurationErrors([InvalidConfigurationError(error) for error in errors])
