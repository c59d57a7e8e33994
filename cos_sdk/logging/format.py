"""Tools for formatting SDK logs."""
import logging
from functools import lru_cache
from typing import Any

MAX_THREAD_NAME_LEN = 12
MAX_NAME_LEN = 26

LOG_FORMAT = f"%(asctime)s.%(msecs)03d %(sdk_level)5s --- [%(sdk_thread){MAX_THREAD_NAME_LEN}s] %(sdk_name)-{MAX_NAME_LEN}s : %(message)s"
LOG_DATE_FORMAT = "%Y-%m-%dT%H:%M:%S"

CUSTOM_LEVEL_NAMES = {
    50: "FATAL",
    40: "ERROR",
    30: "WARN",
    20: "INFO",
    10: "DEBUG",
}


class DefaultFormatter(logging.Formatter):
    """
    A formatter that uses ``LOG_FORMAT`` and ``LOG_DATE_FORMAT``.
    """

    def __init__(self, fmt=LOG_FORMAT, datefmt=LOG_DATE_FORMAT):
        super(DefaultFormatter, self).__init__(fmt=fmt, datefmt=datefmt)


class AddFormattedAttributes(logging.Filter):
    """
    Filter that adds three attributes to a log record:

    - sdk_level: the abbreviated loglevel that's max 5 characters long
    - sdk_name: the abbreviated name of the logger (e.g., `c.aws.protocol.factory`), trimmed to ``MAX_NAME_LEN``
    - sdk_thread: the abbreviated thread name (prefix trimmed, .e.g, ``omeThread-108``)
    """

    max_name_len: int
    max_thread_len: int

    def __init__(self, max_name_len: int = None, max_thread_len: int = None):
        super(AddFormattedAttributes, self).__init__()
        self.max_name_len = max_name_len if max_name_len else MAX_NAME_LEN
        self.max_thread_len = max_thread_len if max_thread_len else MAX_THREAD_NAME_LEN

    def filter(self, record):
        record.sdk_level = CUSTOM_LEVEL_NAMES.get(record.levelno, record.levelname)
        record.sdk_name = self._get_compressed_logger_name(record.name)
        record.sdk_thread = record.threadName[-self.max_thread_len :]
        return True

    @lru_cache(maxsize=256)
    def _get_compressed_logger_name(self, name):
        return compress_logger_name(name, self.max_name_len)


def compress_logger_name(name: str, length: int) -> str:
    """
    Creates a short version of a logger name. For example ``my.very.long.logger.name`` with length=17 turns into
    ``m.v.l.logger.name``. Parts are expanded from the right as long as the result fits into ``length``.

    :param name: the logger name
    :param length: the max length of the logger name
    :return: the compressed name
    """
    if len(name) <= length:
        return name

    parts = list(reversed(name.split(".")))

    # all parts collapsed to a single character: x.x.x is 2n - 1 characters long
    current = (len(parts) * 2) - 1
    result = []

    for index, part in enumerate(parts):
        expanded = current + len(part) - 1
        if expanded > length:
            result.extend(p[0] for p in parts[index:])
            if index == 0:
                # the last part does not even fit, so show as much of it as the budget allows
                remaining = length - current
                if remaining > 0:
                    result[0] = part[: remaining + 1]
            break
        result.append(part)
        current = expanded

    return ".".join(reversed(result))


class WireTraceFormatter(DefaultFormatter):
    """
    Formatter for the wire trace of the HTTP client. Records carry ``direction``, ``status`` and ``body`` attributes;
    bodies longer than ``body_display_threshold`` are abbreviated.
    """

    body_display_threshold = 512

    wire_trace_log_format = LOG_FORMAT + "; %(direction)s(status=%(status)s, body=%(body)s)"

    def __init__(self):
        super().__init__(fmt=self.wire_trace_log_format)

    def _shorten(self, body: Any) -> Any:
        if isinstance(body, (bytes, bytearray)) and len(body) > self.body_display_threshold:
            return f"Bytes({len(body)})"
        return body

    def format(self, record: logging.LogRecord) -> str:
        record.body = self._shorten(getattr(record, "body", None))
        if not hasattr(record, "status"):
            record.status = None
        if not hasattr(record, "direction"):
            record.direction = "wire"
        return super().format(record)
