"""
HookBus: keyed in-process events with gated middleware/post-hook routing.

This package contains:
- events.bus (keyed listener registry with fire-and-forget and gated dispatch)
- events.router (before/after action router built on the registry)
- config and logging_config (environment settings, structlog wiring)
"""

__version__ = "0.1.0"
