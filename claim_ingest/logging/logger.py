import logging
import sys

_RESERVED_ATTRS = frozenset(vars(logging.makeLogRecord({}))) | {"message", "asctime"}


class _FieldsFormatter(logging.Formatter):
    """Appends structured fields passed through `extra` as key=value pairs."""

    def format(self, record: logging.LogRecord) -> str:
        line = super().format(record)
        fields = {
            key: value
            for key, value in vars(record).items()
            if key not in _RESERVED_ATTRS
        }
        if not fields:
            return line
        rendered = " ".join(f"{key}={value}" for key, value in sorted(fields.items()))
        return f"{line} | {rendered}"


class Log:
    """Pipeline-wide logging facade.

    Keyword arguments become structured fields, e.g.
    ``Log.info("Content resolved", address=cid, mirror=url)``.
    """

    _logger: logging.Logger = logging.getLogger("claim_ingest")

    @classmethod
    def configure(cls, log_level: str) -> None:
        """Configure the logger with the specified level and stdout handler."""
        cls._logger.setLevel(log_level.upper())
        if not cls._logger.handlers:
            handler = logging.StreamHandler(sys.stdout)
            handler.setFormatter(
                _FieldsFormatter("%(asctime)s [%(levelname)s] %(message)s")
            )
            cls._logger.addHandler(handler)

    @classmethod
    def info(cls, message: str, **fields: object) -> None:
        """Log an info message."""
        cls._logger.info(message, extra=fields)

    @classmethod
    def error(cls, message: str, **fields: object) -> None:
        """Log an error message."""
        cls._logger.error(message, extra=fields)

    @classmethod
    def warning(cls, message: str, **fields: object) -> None:
        """Log a warning message."""
        cls._logger.warning(message, extra=fields)

    @classmethod
    def debug(cls, message: str, **fields: object) -> None:
        """Log a debug message."""
        cls._logger.debug(message, extra=fields)
