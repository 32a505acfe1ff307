"""Log formatting of eventformatter"""

import logging
from socket import gethostname


class EventFormatterLogFormatter(logging.Formatter):
    """Formatter which additionally offers :code:`%(hostname)s` to the format string, so that the
    logs of formatters on several machines can be told apart."""

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.hostname = gethostname()

    def format(self, record: logging.LogRecord) -> str:
        record.hostname = self.hostname
        return super().format(record)
