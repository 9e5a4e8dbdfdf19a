import logging

from rich.console import Console
from rich.logging import RichHandler


def setup_logger(
    name: str = "computevm", level: int = logging.ERROR, stderr: bool = True
) -> logging.Logger:
    """Configures and returns a logger with RichHandler."""

    logger = logging.getLogger(name)

    # Repeated calls (e.g. from the CLI --verbose flag) only change the level

    if not logger.handlers:
        handler = RichHandler(
            console=Console(stderr=stderr), rich_tracebacks=True, markup=True
        )

        handler.setFormatter(logging.Formatter("%(message)s"))

        logger.addHandler(handler)

    logger.setLevel(level)

    return logger


# Global logger instance (default to ERROR; resolution is silent unless asked)


logger = setup_logger(level=logging.ERROR)
