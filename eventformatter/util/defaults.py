"""Constants shared by the formatter, the configuration and the command line"""

from enum import IntEnum


class EXITCODES(IntEnum):
    """Exit codes of the :code:`eventformatter` command"""

    SUCCESS = 0
    """All events were formatted."""
    ERROR = 1
    """An unexpected error stopped the command."""
    CONFIGURATION_ERROR = 2
    """The configuration could not be loaded or is invalid."""
    PIPELINE_ERROR = 3
    """At least one event produced no output."""


MERGE_MODE = "merge"
DEFAULT_MATCHING_TIMEOUT = 0

LOG_FORMAT = "%(asctime)s %(hostname)s %(name)-14s %(levelname)-8s %(message)s"
LOG_DATE_FORMAT = "%Y-%m-%dT%H:%M:%S"
LOG_LEVELS = ("NOTSET", "DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")

# logging.config.dictConfig schema, log messages go to stderr so that stdout carries the events
DEFAULT_LOG_CONFIG: dict = {
    "version": 1,
    "disable_existing_loggers": False,
    "formatters": {
        "eventformatter": {
            "()": "eventformatter.util.logging.EventFormatterLogFormatter",
            "fmt": LOG_FORMAT,
            "datefmt": LOG_DATE_FORMAT,
        }
    },
    "filters": {},
    "handlers": {
        "stderr": {
            "class": "logging.StreamHandler",
            "formatter": "eventformatter",
            "stream": "ext://sys.stderr",
        },
    },
    "loggers": {"root": {"level": "INFO", "handlers": ["stderr"]}},
}
