"""
Core interfaces and contracts between the pipeline and its host.
"""

from slidegraph.core.cancellation import CancellationToken
from slidegraph.core.interfaces import (
    EllipseNode,
    FrameNode,
    GeometryNode,
    LineNode,
    RectangleNode,
    SceneHost,
    SceneNode,
    TextNode,
)

__all__ = [
    'CancellationToken',
    'EllipseNode',
    'FrameNode',
    'GeometryNode',
    'LineNode',
    'RectangleNode',
    'SceneHost',
    'SceneNode',
    'TextNode',
]
