from __future__ import annotations

"""
Models package for the Realty Growth Demo.

Imports and exposes ORM models so they are registered with Base.metadata.
"""

from realty_demo.db import Base
from .demo_snapshot import DemoSnapshot  # noqa: F401

__all__ = [
    "Base",
    "DemoSnapshot",
]
