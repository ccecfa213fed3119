"""
Command-line interface for cargolaunch.
"""

from .main import main_cli

__all__ = ["main_cli"]
