import logging
from datetime import datetime, timezone
from typing import Any, Callable, Dict, List, Optional

logger = logging.getLogger(__name__)

Listener = Callable[[Dict[str, Any]], None]


class ExecutionLogger:
    """
    The runtime's diagnostic channel.

    Every event is kept in memory (``events``), written to the ``logging``
    logger and handed to subscribed listeners. Message bodies are never
    recorded, only their ids, so resolved secrets stay out of the log.
    """

    def __init__(self, max_events: int = 1000):
        self.events: List[Dict[str, Any]] = []
        self.max_events = max_events
        self._listeners: List[Listener] = []

    def subscribe(self, listener: Listener) -> None:
        self._listeners.append(listener)

    def _publish(self, event_type: str, data: Dict[str, Any]):
        """Record an event and notify listeners."""
        event = {
            "type": event_type,
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "data": data,
        }
        self.events.append(event)
        if len(self.events) > self.max_events:
            del self.events[: len(self.events) - self.max_events]
        for listener in list(self._listeners):
            try:
                listener(event)
            except Exception as e:
                logger.error(f"Diagnostic listener failed: {e}")

    def errors(self) -> List[Dict[str, Any]]:
        return [e for e in self.events if e["type"] in ("node_error", "node_failed")]

    def clear(self) -> None:
        self.events.clear()

    def log_deploy_complete(self, node_count: int):
        logger.info(f"Deployed {node_count} node(s)")
        self._publish("deploy_completed", {"nodes": node_count})

    def log_teardown_complete(self, node_count: int):
        logger.info(f"Stopped {node_count} node(s)")
        self._publish("teardown_completed", {"nodes": node_count})

    def log_node_error(self, node_id: str, error: str, msg: Optional[Dict[str, Any]] = None):
        """A node reported a problem, e.g. a store that failed to decode."""
        logger.error(f"[{node_id}] {error}")
        self._publish("node_error", {
            "node_id": node_id,
            "error": error,
            "msg_id": (msg or {}).get("_msgid"),
        })

    def log_node_failed(
        self,
        node_id: str,
        error: str,
        error_context: Optional[dict] = None,
        msg: Optional[Dict[str, Any]] = None,
    ):
        """
        Log a message that failed in a node and was not forwarded.

        Args:
            node_id: The failing node's ID
            error: Error message string
            error_context: Optional dict with 'category', 'suggestion', 'error_type'
            msg: The message that failed
        """
        logger.error(f"[{node_id}] {error}")
        data = {
            "node_id": node_id,
            "error": error,
            "msg_id": (msg or {}).get("_msgid"),
        }

        if error_context:
            data["error_category"] = error_context.get("category", "unknown")
            data["error_type"] = error_context.get("error_type")
            data["error_suggestion"] = error_context.get("suggestion")

        self._publish("node_failed", data)
