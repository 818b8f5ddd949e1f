"""IoT development environment installer (state-persisting, idempotent).

Core design goals:
- One detected package-manager profile per run
- Idempotent steps in a fixed order
- Fail-fast on external errors
- Pinned toolchain versions
- Centralized logging
"""

__all__ = []
