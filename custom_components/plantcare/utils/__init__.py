# File: utils/__init__.py
"""Pure Python utilities for PlantCare.

This module contains pure Python functions with ZERO Home Assistant dependencies.
All functions here can be unit tested without Home Assistant mocking.

Submodules:
    - dt_utils: Date/time parsing, relative-time formatting, day arithmetic
    - math_utils: Clamping, progress fractions, interval averages

Usage:
    from . import dt_utils
    from .math_utils import clamp_percent
"""

from . import dt_utils, math_utils

__all__ = ["dt_utils", "math_utils"]
