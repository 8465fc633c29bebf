"""Core package initializer for statehistory.

Settings, logging and the Result type live here; the snapshot/rollback
machinery lives in :mod:`statehistory.core.history`.
"""

from __future__ import annotations

__all__ = ["__doc__"]
