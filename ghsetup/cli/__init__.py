"""
ghsetup CLI module.

This module provides the command-line interface for ghsetup.
"""

from .parser import CLI, main

__all__ = ["CLI", "main"]
