import inspect
import logging
import os

from pythonjsonlogger import jsonlogger

LOG_LEVELS = {
    "DEBUG": logging.DEBUG,
    "INFO": logging.INFO,
    "WARNING": logging.WARNING,
    "ERROR": logging.ERROR,
    "CRITICAL": logging.CRITICAL,
}


def _caller_location(frame) -> str:
    """Return 'file:line' for the frame that called the logging method."""
    if frame and frame.f_back:
        caller = frame.f_back
        return f"{caller.f_code.co_filename}:{caller.f_lineno}"
    return "unknown:0"


class Logger(logging.LoggerAdapter):
    _instance = None
    _initialized = False

    def __new__(cls) -> "Logger":
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __init__(self) -> None:
        if Logger._initialized:
            return

        log_level = LOG_LEVELS.get(os.getenv("LOG_LEVEL", "INFO").upper(), logging.INFO)

        formatter = jsonlogger.JsonFormatter(
            "%(asctime)s %(levelname)s %(message)s",
            rename_fields={"asctime": "@timestamp", "levelname": "log_level"},
            datefmt="%Y-%m-%d %H:%M:%S",
            json_ensure_ascii=False,
        )
        handler = logging.StreamHandler()
        handler.setFormatter(formatter)

        logger = logging.getLogger("knowbase")
        logger.setLevel(log_level)
        logger.addHandler(handler)

        super().__init__(logger)
        Logger._initialized = True

    def error(self, msg: str, *args: tuple, **kwargs: dict) -> None:
        """Log at ERROR level, tagging the record with the caller's file and line."""
        kwargs["file"] = _caller_location(inspect.currentframe())
        self.log(logging.ERROR, msg, *args, **kwargs)

    def exception(
        self, msg: str, *args: tuple, exc_info: bool = True, **kwargs: dict
    ) -> None:
        """Log at ERROR level with traceback and the caller's file and line."""
        kwargs["file"] = _caller_location(inspect.currentframe())
        self.log(logging.ERROR, msg, *args, exc_info=exc_info, **kwargs)

    def process(self, msg: str, kwargs: dict) -> tuple[str, dict]:
        # Everything that is not a logging keyword becomes a JSON field
        reserved = {
            key: kwargs.pop(key)
            for key in ("exc_info", "stack_info", "stacklevel")
            if key in kwargs
        }
        result_kwargs = {key: value for key, value in reserved.items() if value is not None}
        if kwargs:
            result_kwargs["extra"] = kwargs
        return msg, result_kwargs


logger = Logger()
logger.info(
    f"Logging level set to {logging.getLevelName(logger.logger.getEffectiveLevel())}"
)
