"""
Configuration
=============

The configuration of eventformatter is a YAML or JSON file with the keys :code:`version`,
:code:`logger` and :code:`formatter`.

..  code-block:: yaml
    :caption: Example of a configuration file
    :linenos:

    version: 1
    logger:
      level: INFO
    formatter:
      weather_formatter:
        type: event_formatter
        mode: clean
        instructions:
          message: "Today's conditions look like {{ conditions }}"
        matchers:
          - path: "{{ date.pretty }}"
            regexp: '^(?P<time>\\d\\d:\\d\\d [AP]M [A-Z]+)'
            to: pretty_date

The configuration is validated completely while loading. All found errors are reported at once
and no event is processed with an invalid configuration.
"""

import json
import logging
from copy import deepcopy
from logging.config import dictConfig
from pathlib import Path
from typing import Optional

from attrs import asdict, define, field, validators
from ruamel.yaml import YAML
from ruamel.yaml.error import YAMLError

from eventformatter.abc.component import Component
from eventformatter.factory import Factory
from eventformatter.factory_error import InvalidConfigurationError, InvalidConfigurationErrors
from eventformatter.util.defaults import DEFAULT_LOG_CONFIG, LOG_LEVELS

logger = logging.getLogger("Config")

yaml = YAML(typ="safe", pure=True)


class RequiredConfigurationKeyMissingError(InvalidConfigurationError):
    """Raise if required option is missing in configuration."""

    def __init__(self, key: str) -> None:
        super().__init__(f"Required option is missing: {key}")


@define(kw_only=True)
class LoggerConfig:
    """The logger config class used in Configuration.
    The schema for this class is derived from the python logging module:
    https://docs.python.org/3/library/logging.config.html#dictionary-schema-details
    """

    version: int = field(validator=validators.instance_of(int), default=1)
    formatters: dict = field(validator=validators.instance_of(dict), factory=dict)
    filters: dict = field(validator=validators.instance_of(dict), factory=dict)
    handlers: dict = field(validator=validators.instance_of(dict), factory=dict)
    disable_existing_loggers: bool = field(validator=validators.instance_of(bool), default=False)
    level: str = field(
        default="INFO",
        validator=[
            validators.instance_of(str),
            validators.in_(LOG_LEVELS),
        ],
        eq=False,
    )
    """The log level of the root logger. Defaults to :code:`INFO`."""
    loggers: dict = field(validator=validators.instance_of(dict), factory=dict)
    """The loggers loglevel configuration, e.g.

    .. code-block:: yaml

        logger:
            level: ERROR
            loggers:
                "Matcher": {"level": "DEBUG"}
    """

    def __attrs_post_init__(self) -> None:
        for key, value in deepcopy(DEFAULT_LOG_CONFIG).items():
            if key in ("loggers", "version"):
                continue
            if not getattr(self, key):
                setattr(self, key, value)
        loggers = deepcopy(DEFAULT_LOG_CONFIG["loggers"])
        for logger_name, logger_config in self.loggers.items():
            loggers.setdefault(logger_name, {}).update(logger_config)
        loggers["root"].update({"level": self.level})
        self.loggers = loggers

    def setup_logging(self) -> None:
        """Setup the logging configuration."""
        log_config = asdict(self)
        log_config.pop("level")
        dictConfig(log_config)


@define(kw_only=True)
class Configuration:
    """the configuration class"""

    version: str = field(validator=validators.instance_of(str), converter=str, default="unset")
    """It is optionally possible to set a version to your configuration file. This has no effect
    on the processing and is merely used for documentation purposes. Defaults to :code:`unset`."""
    logger: LoggerConfig = field(
        validator=validators.instance_of(LoggerConfig),
        factory=LoggerConfig,
        converter=lambda x: LoggerConfig(**x) if isinstance(x, dict) else x,
    )
    """Logger configuration. Defaults to log level :code:`INFO` on the console."""
    formatter: dict = field(validator=validators.instance_of(dict))
    """The formatter definition with exactly one component, e.g.
    :code:`{"my_formatter": {"type": "event_formatter", ...}}`."""
    source: Optional[str] = field(default=None, eq=False)
    """The location the configuration was loaded from"""

    @classmethod
    def from_dict(cls, config_dict: dict, source: Optional[str] = None) -> "Configuration":
        """Create configuration from a dict.

        Raises
        ------
        InvalidConfigurationError
            if the configuration is malformed
        """
        if not isinstance(config_dict, dict):
            raise InvalidConfigurationError(f"Invalid configuration file: {source} is no mapping")
        if "formatter" not in config_dict:
            raise RequiredConfigurationKeyMissingError("formatter")
        try:
            return Configuration(**(config_dict | {"source": source}))
        except (TypeError, ValueError) as error:
            raise InvalidConfigurationError(
                f"Invalid configuration file: {source} {error.args[0]}"
            ) from error

    @classmethod
    def from_source(cls, config_path: str) -> "Configuration":
        """Create configuration from a file. JSON is tried first, YAML afterwards.

        Parameters
        ----------
        config_path : str
            path of the file to create configuration from.

        Returns
        -------
        config : Configuration
            Configuration object attrs class.

        """
        try:
            content = Path(config_path).read_text(encoding="utf8")
        except OSError as error:
            raise InvalidConfigurationError(
                f"Configuration file could not be read: {config_path} {error.strerror}"
            ) from error
        try:
            config_dict = json.loads(content)
        except ValueError:
            try:
                config_dict = yaml.load(content)
            except YAMLError as error:
                raise InvalidConfigurationError(
                    f"Invalid yaml or json file: {config_path} {error}"
                ) from error
        return cls.from_dict(config_dict, source=config_path)

    def create_formatter(self, registry=None) -> Component:
        """Creates the configured formatter component.

        Raises
        ------
        InvalidConfigurationErrors
            if the formatter options are invalid
        """
        try:
            return Factory.create(self.formatter, registry)
        except InvalidConfigurationErrors:
            raise
        except InvalidConfigurationError as error:
            raise InvalidConfigurationErrors([error]) from error

    def verify(self) -> None:
        """Verifies the formatter configuration without keeping the created component."""
        self.create_formatter()
        logger.debug("Configuration %s verified", self.source)
