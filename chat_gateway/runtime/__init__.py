"""Runtime package.

Keep this module dependency-light: importing `chat_gateway.runtime.*` in unit
tests should not require a backend credential or network access.
"""

__all__: list[str] = []
