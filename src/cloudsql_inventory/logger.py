import logging

from rich.console import Console
from rich.logging import RichHandler


def setup_logger(
    name: str = "cloudsql_inventory", level: int = logging.WARNING
) -> logging.Logger:
    """
    Returns the package logger at the given level.
    A RichHandler on stderr is attached the first time only, so stdout stays
    reserved for the report table.
    """
    logger = logging.getLogger(name)
    logger.setLevel(level)

    if not any(isinstance(h, RichHandler) for h in logger.handlers):
        handler = RichHandler(
            console=Console(stderr=True),
            rich_tracebacks=True,
            markup=True,
            show_path=False,
        )
        handler.setFormatter(logging.Formatter("%(message)s"))
        logger.addHandler(handler)

    return logger


logger = setup_logger()
