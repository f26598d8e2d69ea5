"""
Port channel - message passing with the game layer.

Every message is a dict with a 'type' (the port name) and a 'data' payload.
Inbound messages are routed to the handler subscribed to their port;
outbound messages go to a sink (window.postMessage in the browser).
"""
from typing import Any, Callable, Dict, Optional

from picross.logging import get_logger
from .platform_compat import post_to_parent

log = get_logger('ports')

# Inbound (game layer -> bridge)
COMPUTE_BOARD_SIZE = 'compute-board-size'
REQUEST_TRANSFORM_MOUSE_POS = 'request-transform-mouse-pos'
REQUEST_BOARD_MOUSE_POS = 'request-board-mouse-pos'
SAVE_STATE = 'save-state'

# Outbound (bridge -> game layer)
BOARD_SIZE_RESULT = 'board-size-result'
TRANSFORM_RESULT = 'transform-result'
BOARD_MOUSE_POS_RESULT = 'board-mouse-pos-result'
POINTER_DOWN = 'pointer-down'
POINTER_UP = 'pointer-up'
INIT = 'init'
ERROR = 'error'

Sink = Callable[[Dict[str, Any]], None]


class PortChannel:
    """
    Routes messages between the bridge and the game layer.

    Handler failures never escape process_message(); they are logged and
    reported back on the 'error' port.
    """

    def __init__(self, sink: Optional[Sink] = None):
        """
        Args:
            sink: Receives every outbound message; defaults to the parent frame
        """
        self._sink = sink or post_to_parent
        self._handlers: Dict[str, Callable[[Any], None]] = {}

    def subscribe(self, port: str, handler: Callable[[Any], None]):
        """
        Register the handler for an inbound port. One handler per port.

        Args:
            port: Port name
            handler: Callback receiving the message payload
        """
        self._handlers[port] = handler

    def has_handler(self, port: str) -> bool:
        return port in self._handlers

    def process_message(self, message: Dict[str, Any]) -> bool:
        """
        Dispatch an inbound message.

        Returns:
            True if a handler ran successfully
        """
        port = message.get('type', '')
        handler = self._handlers.get(port)

        if handler is None:
            log.debug("No handler for port %r", port)
            return False

        try:
            handler(message.get('data'))
            return True
        except Exception as e:
            log.exception("Handler error for %s", port)
            self.send(ERROR, {'port': port, 'message': str(e)})
            return False

    def send(self, port: str, data: Any = None):
        """Send a message on an outbound port."""
        self._sink({'type': port, 'data': data})
