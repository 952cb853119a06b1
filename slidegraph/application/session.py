"""
Plugin session: the message loop between the UI and the import pipeline.

Two control messages are understood:

- ``{"type": "import-slides", "presentation": {...}, "imageData": {...}}``
- ``{"type": "cancel"}``

Everything the pipeline reports is posted back through ``post_message``.
"""

from typing import Any, Callable, Dict, Optional

from pydantic import ValidationError

from slidegraph.application.event_bus import EventBus
from slidegraph.config.import_config import ImportConfig, get_config
from slidegraph.core.cancellation import CancellationToken
from slidegraph.core.interfaces import SceneHost
from slidegraph.models.events import ImportEvent, ImportResult
from slidegraph.models.presentation import Presentation
from slidegraph.services.import_orchestrator import ImportOrchestrator
from slidegraph.setup_logging import get_logger

logger = get_logger(__name__)


class PluginSession:
    """Dispatches UI messages for one host session."""

    def __init__(
        self,
        host: SceneHost,
        post_message: Callable[[Dict[str, Any]], Any],
        config: Optional[ImportConfig] = None
    ):
        self.host = host
        self.config = config or get_config()
        self.event_bus = EventBus()
        self.event_bus.subscribe_all(post_message)
        self.cancel_token = CancellationToken()
        self.closed = False

    async def handle_message(self, message: Dict[str, Any]) -> Optional[ImportResult]:
        message_type = message.get("type") if isinstance(message, dict) else None
        if message_type == "import-slides":
            return await self.import_slides(message.get("presentation"), message.get("imageData"))
        elif message_type == "cancel":
            self.cancel()
        else:
            logger.warning(f"Ignoring unknown message type: {message_type!r}")
        return None

    async def import_slides(self, payload: Any, image_data: Any = None) -> Optional[ImportResult]:
        try:
            presentation = Presentation.model_validate(payload or {})
        except ValidationError as e:
            logger.error(f"Rejected presentation payload: {e}")
            event = ImportEvent.error(f"Invalid presentation data ({e.error_count()} problem(s))")
            await self.event_bus.emit(event)
            return None

        if image_data is not None and not isinstance(image_data, dict):
            logger.warning("imageData is not a mapping; importing without images")
            image_data = None

        self.cancel_token = CancellationToken()
        orchestrator = ImportOrchestrator(
            self.host,
            event_bus=self.event_bus,
            config=self.config,
            cancel_token=self.cancel_token
        )
        return await orchestrator.run(presentation, image_data or {})

    def cancel(self) -> None:
        """Stop the running import, if any, and close the host session."""
        logger.info("Cancel requested")
        self.cancel_token.cancel()
        if not self.closed:
            self.closed = True
            self.host.close()
