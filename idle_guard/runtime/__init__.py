"""Runtime package.

Keep this module dependency-light: importing `idle_guard.runtime.*` in unit tests
should not require the web stack.
"""

__all__: list[str] = []
