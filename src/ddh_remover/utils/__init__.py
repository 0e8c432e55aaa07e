"""Configuration and logging helpers."""

from ddh_remover.utils.config import Config
from ddh_remover.utils.logger import setup_logger

__all__ = ["Config", "setup_logger"]
