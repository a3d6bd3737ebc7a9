"""
Utilities Module
================

Contains utility functions and helper classes.
"""

from .logger import setup_logging

__all__ = [
    'setup_logging',
]
