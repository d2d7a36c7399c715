"""
Logging utilities
"""
import logging
from typing import Optional

from rich.console import Console
from rich.logging import RichHandler

from config.settings import LOG_LEVEL

# Global console for rich output
console = Console()


def setup_logging(level: Optional[str] = None):
    """Configure root logging with a rich handler"""
    logging.basicConfig(
        level=getattr(logging, level or LOG_LEVEL),
        format="%(message)s",
        datefmt="[%X]",
        handlers=[
            RichHandler(
                console=console,
                rich_tracebacks=True,
                show_path=False,
                markup=True
            )
        ],
        force=True,
    )

    # Reduce noise from external libraries
    for noisy in ("web3", "urllib3", "asyncio", "aiohttp"):
        logging.getLogger(noisy).setLevel(logging.WARNING)


def get_logger(name: str) -> logging.Logger:
    """Get a logger instance"""
    return logging.getLogger(name)
