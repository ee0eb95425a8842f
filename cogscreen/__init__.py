"""cogscreen: timed cognitive-screening battery for reading difficulties.

Administers the module battery trial by trial, scores each module onto
0-100 and aggregates the results.
"""

from __future__ import annotations

__version__ = "0.1.0"

__all__ = ["__version__"]
