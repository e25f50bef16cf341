"""
Logging module for procwarden.
This module provides the root logger setup shared by the console and the supervisor.
"""

from .setup import setup_logging, MainFormatter

__all__ = ["setup_logging", "MainFormatter"]
