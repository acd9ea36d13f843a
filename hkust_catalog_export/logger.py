import logging

from rich.logging import RichHandler


def setup_logging(verbose: bool = False) -> logging.Logger:
    logging.basicConfig(
        level="DEBUG" if verbose else "INFO",
        format="%(message)s",
        handlers=[RichHandler()],
    )
    return logging.getLogger("hkust_catalog_export")
