"""
Events and results produced by one import pass.
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, List, Optional


@dataclass
class ImportEvent:
    """Event posted to the caller during an import"""
    type: str  # 'progress', 'complete', 'error', 'cancelled'
    timestamp: datetime
    data: Dict[str, Any]

    @classmethod
    def progress(cls, percent: float, text: str) -> 'ImportEvent':
        return cls(
            type='progress',
            timestamp=datetime.now(),
            data={'percent': percent, 'text': text}
        )

    @classmethod
    def complete(cls, slide_count: int) -> 'ImportEvent':
        return cls(
            type='complete',
            timestamp=datetime.now(),
            data={'slideCount': slide_count}
        )

    @classmethod
    def error(cls, message: str) -> 'ImportEvent':
        return cls(
            type='error',
            timestamp=datetime.now(),
            data={'message': message}
        )

    @classmethod
    def cancelled(cls, slide_count: int) -> 'ImportEvent':
        return cls(
            type='cancelled',
            timestamp=datetime.now(),
            data={'slideCount': slide_count}
        )

    def to_message(self) -> Dict[str, Any]:
        """Flat message shape posted to the UI, e.g. ``{type, percent, text}``."""
        return {'type': self.type, **self.data}


@dataclass
class ElementFailure:
    """One element that could not be materialized."""
    path: str  # "3" for the fourth top-level element, "3.1" for its second child
    kind: str
    message: str


@dataclass
class SlideReport:
    index: int
    element_count: int
    node_count: int = 0
    failures: List[ElementFailure] = field(default_factory=list)


@dataclass
class ImportResult:
    """Outcome of :meth:`ImportOrchestrator.run`."""
    slide_count: int = 0
    frames: List[Any] = field(default_factory=list)
    slides: List[SlideReport] = field(default_factory=list)
    cancelled: bool = False
    error: Optional[str] = None

    @property
    def failures(self) -> List[ElementFailure]:
        return [failure for report in self.slides for failure in report.failures]

    @property
    def succeeded(self) -> bool:
        return self.error is None and not self.cancelled
