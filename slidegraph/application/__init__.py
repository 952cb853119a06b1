"""
Application services and event handling.
"""

from slidegraph.application.event_bus import EventBus, Events

__all__ = ['EventBus', 'Events']
