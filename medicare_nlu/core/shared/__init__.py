"""
Shared core utilities.
"""

from medicare_nlu.core.shared.logger import (
    ColoredFormatter,
    JSONFormatter,
    NLULogger,
    PlainFormatter,
    configure_logging,
    get_nlu_logger,
)

__all__ = [
    "ColoredFormatter",
    "JSONFormatter",
    "NLULogger",
    "PlainFormatter",
    "configure_logging",
    "get_nlu_logger",
]
