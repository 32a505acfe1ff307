# pylint: disable=logging-fstring-interpolation
"""This module can be used to start the eventformatter."""
import logging
import logging.config
import os
import sys
from typing import IO, Iterator

import click
import msgspec
from colorama import Fore

from eventformatter.event import Event
from eventformatter.factory_error import InvalidConfigurationError
from eventformatter.util.configuration import Configuration
from eventformatter.util.defaults import DEFAULT_LOG_CONFIG, EXITCODES
from eventformatter.util.helper import get_package_version, get_versions_string, print_fcolor

logging.captureWarnings(True)
logging.config.dictConfig(DEFAULT_LOG_CONFIG)
logger = logging.getLogger("eventformatter")

_decoder = msgspec.json.Decoder()
_encoder = msgspec.json.Encoder()


def _get_configuration(config_path: str) -> Configuration:
    try:
        config = Configuration.from_source(config_path)
        config.logger.setup_logging()
        config.verify()
        logger.debug(f"Log level set to '{config.logger.level}'")
        return config
    except InvalidConfigurationError as error:
        print(f"InvalidConfigurationError: {error}", file=sys.stderr)
        sys.exit(EXITCODES.CONFIGURATION_ERROR.value)


def _read_events(stream: IO[str]) -> Iterator[Event]:
    for line_number, line in enumerate(stream, start=1):
        if not line.strip():
            continue
        try:
            document = _decoder.decode(line)
        except msgspec.DecodeError as error:
            logger.error(f"Skipped line {line_number}, it is not valid json: {error}")
            continue
        if not isinstance(document, dict):
            logger.error(f"Skipped line {line_number}, it is not a json object")
            continue
        try:
            yield Event.from_dict(document)
        except (TypeError, ValueError) as error:
            logger.error(f"Skipped line {line_number}, it is not a valid event: {error}")


@click.group(name="eventformatter")
@click.version_option(version=get_package_version(), message="%(version)s")
def cli() -> None:
    """
    eventformatter formats events by regular expression matchers and instruction templates.
    """


@cli.command(short_help="Format events read as json lines")
@click.argument("config")
@click.argument("events", type=click.File("r", encoding="utf8"), default="-")
def run(config: str, events: IO[str]) -> None:
    """
    Format the events with the given configuration and print the results as json lines.

    \b
    CONFIG is a path to a configuration file.
    EVENTS is a path to a jsonl file, defaults to stdin.

    A line with a "payload" object is read as an event with the optional
    fields "created_at" and "agent", all other fields of the line are ignored.
    Any other line is used as the payload of an event created now.
    """
    configuration = _get_configuration(config)
    for version in get_versions_string(configuration).split("\n"):
        logger.info(version)
    formatter = configuration.create_formatter()
    formatter.setup()
    failed = 0
    try:
        for event in _read_events(events):
            result = formatter.process(event)
            for error in result.errors:
                failed += 1
                logger.error(f"{formatter.describe()} could not process event: {error}")
            for output in result.data:
                click.echo(_encoder.encode(output).decode("utf8"))
    # pylint: disable=broad-except
    except Exception as error:
        if os.environ.get("DEBUG", False):
            logger.exception(f"A critical error occurred: {error}")  # pragma: no cover
        else:
            logger.critical(f"A critical error occurred: {error}")
        sys.exit(EXITCODES.ERROR.value)
    # pylint: enable=broad-except
    finally:
        formatter.shut_down()
    if failed:
        logger.warning(f"{failed} event(s) could not be formatted")
        sys.exit(EXITCODES.PIPELINE_ERROR.value)


@cli.command(short_help="Describe the fields of the formatted events")
@click.argument("config")
def describe(config: str) -> None:
    """
    Print which fields the events created with the given configuration will have.

    CONFIG is a path to a configuration file.
    """
    configuration = _get_configuration(config)
    formatter = configuration.create_formatter()
    click.echo(formatter.describe_output())


@cli.group(name="test", short_help="Execute tests against a given configuration")
def test() -> None:
    """
    Execute tests against a configuration.
    """


@test.command(name="config")
@click.argument("config")
def test_config(config: str) -> None:
    """
    Verify the configuration file

    CONFIG is a path to a configuration file.
    """
    _get_configuration(config)
    print_fcolor(Fore.GREEN, "The verification of the configuration was successful")


def main():
    """entrypoint of the eventformatter command"""
    cli()  # pylint: disable=no-value-for-parameter


if __name__ == "__main__":
    main()
