"""Utility functions for the deployer."""

from deployer.utils.logging import configure_logging, get_logger, mask_url

__all__ = [
    "configure_logging",
    "get_logger",
    "mask_url",
]
