"""Test helpers.

Focused modules:
- scheduler.py: manual clock and timers for deterministic idle tests
- tabs.py: coordinators wired to recording sign-out/navigate callbacks
"""

from __future__ import annotations

from .scheduler import ManualScheduler
from .tabs import TabRecorder, make_tab

__all__ = ["ManualScheduler", "TabRecorder", "make_tab"]
