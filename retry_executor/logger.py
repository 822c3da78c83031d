"""Logging infrastructure with per-component log files."""

import logging
import sys
from pathlib import Path
from typing import Self

from retry_executor.config import Settings

ROOT_LOGGER_NAME = "retry_executor"
LOG_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


class LogManager:
    """Manages loggers for the components of the package.

    Component loggers are named ``retry_executor.<component>``, which is the
    same name the component modules get from ``logging.getLogger(__name__)``,
    so attaching a component logger here routes that module's records into
    ``<log_dir>/<component>.log`` as well as stdout.
    """

    _instance: Self | None = None
    _initialized: bool = False

    def __new__(cls) -> Self:
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __init__(self) -> None:
        if LogManager._initialized:
            return
        self._loggers: dict[str, logging.Logger] = {}
        self._log_dir: Path = Path("./logs")
        self._log_level: int = logging.INFO
        self._formatter: logging.Formatter | None = None
        LogManager._initialized = True

    def initialize(self, settings: Settings) -> None:
        """Initialize the logging system with settings."""
        self._log_dir = settings.log_dir
        self._log_level = getattr(logging, settings.log_level.upper())
        self._formatter = logging.Formatter(fmt=LOG_FORMAT, datefmt=DATE_FORMAT)

        self._log_dir.mkdir(parents=True, exist_ok=True)

        # Console output for modules that have no component logger yet
        root_logger = logging.getLogger(ROOT_LOGGER_NAME)
        root_logger.setLevel(self._log_level)
        if not root_logger.handlers:
            console_handler = logging.StreamHandler(sys.stdout)
            console_handler.setFormatter(self._formatter)
            root_logger.addHandler(console_handler)

        self.attach_components()

    def get_logger(self, name: str) -> logging.Logger:
        """Get or create a logger for a specific component.

        Each component gets its own log file in addition to console output.
        Uses default settings if :meth:`initialize` has not been called.
        """
        if name in self._loggers:
            return self._loggers[name]

        if self._formatter is None:
            self._formatter = logging.Formatter(fmt=LOG_FORMAT, datefmt=DATE_FORMAT)

        logger = logging.getLogger(f"{ROOT_LOGGER_NAME}.{name}")
        logger.setLevel(self._log_level)

        # Handlers below replace the root console handler
        logger.propagate = False

        self._log_dir.mkdir(parents=True, exist_ok=True)

        file_handler = logging.FileHandler(self._log_dir / f"{name}.log", mode="a")
        file_handler.setFormatter(self._formatter)
        file_handler.setLevel(self._log_level)
        logger.addHandler(file_handler)

        console_handler = logging.StreamHandler(sys.stdout)
        console_handler.setFormatter(self._formatter)
        console_handler.setLevel(self._log_level)
        logger.addHandler(console_handler)

        self._loggers[name] = logger
        return logger

    def attach_components(self) -> None:
        """Give every package module its own log file.

        Records from the executor, the JSON client and the entry point then
        land in executor.log, clients.json_client.log and main.log.
        """
        self.get_executor_logger()
        self.get_client_logger()
        self.get_main_logger()

    def get_executor_logger(self) -> logging.Logger:
        """Get logger for the retry executor."""
        return self.get_logger("executor")

    def get_client_logger(self) -> logging.Logger:
        """Get logger for the JSON HTTP client."""
        return self.get_logger("clients.json_client")

    def get_main_logger(self) -> logging.Logger:
        """Get logger for the demo entry point."""
        return self.get_logger("main")


# Global instance
log_manager = LogManager()


def setup_logging(settings: Settings) -> None:
    """Initialize logging with settings."""
    log_manager.initialize(settings)


def get_logger(name: str) -> logging.Logger:
    """Get a logger for a component."""
    return log_manager.get_logger(name)


def reset_logging() -> None:
    """Detach the handlers added by the LogManager and start a fresh one.

    Package loggers stay registered with ``logging`` because modules keep
    references to them; they go back to propagating at level NOTSET.
    """
    global log_manager

    for name, logger in list(logging.Logger.manager.loggerDict.items()):
        if not isinstance(logger, logging.Logger):
            continue
        if name != ROOT_LOGGER_NAME and not name.startswith(f"{ROOT_LOGGER_NAME}."):
            continue
        for handler in logger.handlers[:]:
            logger.removeHandler(handler)
            # Console handlers do not own sys.stdout, which may already be closed
            if isinstance(handler, logging.FileHandler):
                handler.close()
        logger.propagate = True
        logger.setLevel(logging.NOTSET)

    LogManager._instance = None
    LogManager._initialized = False
    log_manager = LogManager()
