"""
Exception hierarchy for the slide import pipeline.

Three severities are distinguished:
- element-local errors, converted to a placeholder or a logged skip
- font errors, handled inside the resolution ladder except the last resort
- pipeline errors, surfaced to the caller as a single terminal error event
"""

from typing import Optional, Dict, Any


class SlideImportError(Exception):
    """Base exception for all import errors"""

    def __init__(
        self,
        message: str,
        cause: Optional[Exception] = None,
        context: Optional[Dict[str, Any]] = None
    ):
        super().__init__(message)
        self.message = message
        self.cause = cause
        self.context = context or {}

    def __str__(self):
        parts = [super().__str__()]
        if self.cause:
            parts.append(f" (caused by: {type(self.cause).__name__}: {str(self.cause)})")
        if self.context:
            parts.append(f" Context: {self.context}")
        return "".join(parts)


# === Element-local exceptions ===

class ElementMaterializationError(SlideImportError):
    """A single slide element could not be materialized"""

    def __init__(self, element_kind: str, message: str, **kwargs):
        super().__init__(message, **kwargs)
        self.element_kind = element_kind
        self.context.setdefault('element_kind', element_kind)


class UnsupportedElementError(ElementMaterializationError):
    """Element kind has no materializer"""
    pass


class GroupDepthError(ElementMaterializationError):
    """Group nesting exceeds the configured depth limit"""

    def __init__(self, depth: int, max_depth: int, **kwargs):
        super().__init__(
            "group",
            f"Group nesting depth {depth} exceeds limit of {max_depth}",
            **kwargs
        )
        self.depth = depth
        self.max_depth = max_depth


class ImagePayloadError(ElementMaterializationError):
    """Image payload is missing, malformed or not decodable"""

    def __init__(self, message: str, **kwargs):
        super().__init__("image", message, **kwargs)


# === Font exceptions ===

class FontLoadError(SlideImportError):
    """The host failed to load one font face"""

    def __init__(self, family: str, style: str, message: Optional[str] = None, **kwargs):
        super().__init__(message or f"Font unavailable: {family} {style}", **kwargs)
        self.family = family
        self.style = style


class FontUnavailableError(SlideImportError):
    """Even the last-resort font failed; the host has no usable fonts"""
    pass


# === Pipeline exceptions ===

class PipelineError(SlideImportError):
    """Import-level failure reported as a terminal error event"""
    pass


class EmptyPresentationError(PipelineError):
    """Presentation has no slides"""

    def __init__(self, **kwargs):
        super().__init__("No slides found in presentation", **kwargs)


class ImportCancelledError(PipelineError):
    """The host asked the import to stop"""

    def __init__(self, slides_built: int = 0, **kwargs):
        super().__init__("Import cancelled", **kwargs)
        self.slides_built = slides_built


# === Configuration exceptions ===

class ConfigurationError(SlideImportError):
    """Invalid configuration value"""
    pass


# === Recovery helpers ===

def is_element_local(error: Exception) -> bool:
    """Check if an error may be swallowed while building one element"""
    fatal_types = (
        FontUnavailableError,
        ImportCancelledError,
    )
    return not isinstance(error, fatal_types)
