"""Small helpers of the command line and the self-description"""

import json
import re
import sys
from importlib.metadata import PackageNotFoundError, version
from typing import TYPE_CHECKING, Any, Optional

from colorama import Back, Fore
from colorama.ansi import AnsiFore

if TYPE_CHECKING:  # pragma: no cover
    from eventformatter.util.configuration import Configuration

_WORD_BOUNDARY = re.compile(r"(?<=[a-z0-9])(?=[A-Z])|(?<=[A-Z])(?=[A-Z][a-z])")


def print_fcolor(fore: AnsiFore, message: str):
    """Prints the message in the given font color, the terminal colors are reset afterwards."""
    print(f"{fore}{message}{Fore.RESET}{Back.RESET}")


def camel_to_snake(camel: str) -> str:
    """:code:`EventFormatter` becomes :code:`event_formatter`"""
    return _WORD_BOUNDARY.sub("_", camel).lower()


def pretty_print(value: Any) -> str:
    """Render a json compatible value as indented json, indented by four spaces after the first
    line so that it can be embedded in an indented markdown code block."""
    return json.dumps(value, indent=2, ensure_ascii=False, default=str).replace("\n", "\n    ")


def get_package_version() -> str:
    """returns the installed version of eventformatter"""
    try:
        return version("eventformatter")
    except PackageNotFoundError:  # pragma: no cover
        return "unknown"


def get_versions_string(config: Optional["Configuration"] = None) -> str:
    """
    Lists the python and eventformatter versions, one per line. With a configuration its version
    and the file it was loaded from are listed as well.
    """
    rows = [
        ("python version:", sys.version.split()[0]),
        ("eventformatter version:", get_package_version()),
    ]
    if config:
        rows.append(("configuration version:", f"{config.version}, {config.source}"))
    return "\n".join(f"{label:<25}{value}" for label, value in rows)
