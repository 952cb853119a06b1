"""
slidegraph: import pre-parsed slide decks into a host 2-D scene graph.

The public entry points are :class:`PluginSession` (message driven, as a
plugin UI would use it) and :class:`ImportOrchestrator` (direct calls).
"""

__version__ = "0.1.0"

from slidegraph.application.session import PluginSession
from slidegraph.models.presentation import Presentation
from slidegraph.services.import_orchestrator import ImportOrchestrator
from slidegraph.services.memory_host import InMemorySceneHost

__all__ = [
    'ImportOrchestrator',
    'InMemorySceneHost',
    'PluginSession',
    'Presentation',
    '__version__',
]
