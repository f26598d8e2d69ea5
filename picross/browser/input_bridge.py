"""
Input Bridge - board geometry and mouse input for the game layer.

Answers the game layer's geometry requests and forwards mouse buttons:

- compute-board-size: board box, measured on the next frame
- request-transform-mouse-pos / request-board-mouse-pos: device point to
  board coordinates
- pointer-down / pointer-up: primary (1) and secondary (3) button presses
- save-state: persist progress

Every request has a synchronous counterpart returning None when the board is
not mounted. Over the port channel a missing board means no reply at all;
the game layer retries on its own schedule.
"""
from dataclasses import dataclass
from typing import Any, Optional, Sequence

from picross.errors import BridgeError
from picross.logging import get_logger
from . import ports
from .config import BridgeConfig
from .host import CONTEXTMENU, MOUSEDOWN, MOUSEUP, BoardElement, Host, MouseEvent
from .ports import PortChannel
from .primitives import BoardGeometry, Point2D
from .storage import LocalStore, MemoryStorage, SavedState, load_state, save_state
from .transform import screen_to_board_matrix, screen_to_board_offset

log = get_logger('input_bridge')

FORWARDED_BUTTONS = (1, 3)


@dataclass
class BridgeSession:
    """Per-page bridge state."""
    listeners_installed: bool = False


class InputBridge:
    """
    Connects a host page to the game layer's ports.

    Listeners are installed on the board the first time a request finds it,
    and never twice in one session.
    """

    def __init__(
        self,
        host: Host,
        channel: PortChannel,
        config: Optional[BridgeConfig] = None,
        session: Optional[BridgeSession] = None,
        store: Optional[LocalStore] = None,
    ):
        """
        Args:
            host: Page adapter giving access to the board
            channel: Port channel shared with the game layer
            config: Bridge options
            session: Session state; a fresh one by default
            store: Local storage for saved progress
        """
        self.host = host
        self.channel = channel
        self.config = config or BridgeConfig()
        self.session = session or BridgeSession()
        self.store = store if store is not None else MemoryStorage()
        self._setup_handlers()

    def _setup_handlers(self):
        """Subscribe to the inbound ports."""
        self.channel.subscribe(ports.COMPUTE_BOARD_SIZE, self._handle_compute_board_size)
        self.channel.subscribe(ports.REQUEST_TRANSFORM_MOUSE_POS, self._handle_transform_mouse_pos)
        self.channel.subscribe(ports.REQUEST_BOARD_MOUSE_POS, self._handle_board_mouse_pos)
        self.channel.subscribe(ports.SAVE_STATE, self._handle_save_state)

    # =========================================================================
    # Board lookup
    # =========================================================================

    def find_board(self) -> Optional[BoardElement]:
        """Return the mounted board, installing listeners on first sight."""
        board = self.host.get_element_by_id(self.config.board_id)
        if board is not None:
            self._install_on(board)
        return board

    def install_pointer_listeners(self) -> bool:
        """
        Install the mouse listeners now.

        Returns:
            True if the listeners are installed (now or earlier)
        """
        return self.find_board() is not None

    def _install_on(self, board: BoardElement):
        if self.session.listeners_installed:
            return
        board.add_event_listener(MOUSEDOWN, self._on_mouse_down)
        board.add_event_listener(MOUSEUP, self._on_mouse_up)
        board.add_event_listener(CONTEXTMENU, self._on_context_menu)
        self.session.listeners_installed = True
        log.debug("Pointer listeners installed on #%s", self.config.board_id)

    # =========================================================================
    # Board size
    # =========================================================================

    def measure_board(self) -> Optional[BoardGeometry]:
        """Measure the board now, or None if it is not mounted."""
        board = self.find_board()
        if board is None:
            return None
        return self._measure(board)

    def compute_board_size(self) -> bool:
        """
        Measure the board on the next frame and send board-size-result.

        Returns:
            False if there is no board; nothing will be sent then
        """
        board = self.find_board()
        if board is None:
            log.debug("compute-board-size: no #%s element yet", self.config.board_id)
            return False

        def on_frame():
            geometry = self._measure(board)
            self.channel.send(ports.BOARD_SIZE_RESULT, geometry.to_payload())

        self.host.request_animation_frame(on_frame)
        return True

    @staticmethod
    def _measure(board: BoardElement) -> BoardGeometry:
        return BoardGeometry.measure(board.get_bbox(), board.get_bounding_client_rect())

    # =========================================================================
    # Mouse position
    # =========================================================================

    def transform_mouse_pos(self, x: float, y: float, mode: Optional[str] = None) -> Optional[Point2D]:
        """
        Map a device point to board coordinates.

        Args:
            x, y: Device (client) coordinates
            mode: 'matrix' or 'rect-offset'; defaults to config.transform_mode

        Returns:
            Board point, or None if there is no board

        Raises:
            BridgeError: If the board transform can't be inverted
        """
        mode = mode or self.config.transform_mode
        board = self.find_board()
        if board is None:
            return None

        point = Point2D(float(x), float(y))
        if mode == 'matrix':
            return screen_to_board_matrix(board.get_screen_ctm(), point)
        elif mode == 'rect-offset':
            return screen_to_board_offset(board.get_bounding_client_rect(), point)
        raise BridgeError(f"Unknown transform mode: {mode!r}")

    def board_mouse_pos(self, x: float, y: float) -> Optional[Point2D]:
        """Second transform channel, using config.board_pos_mode."""
        return self.transform_mouse_pos(x, y, self.config.board_pos_mode)

    # =========================================================================
    # Saved state
    # =========================================================================

    def save_state(self, data: Any):
        save_state(self.store, data, self.config.storage_key)

    def load_state(self) -> SavedState:
        return load_state(self.store, self.config.storage_key)

    # =========================================================================
    # Port handlers
    # =========================================================================

    def _handle_compute_board_size(self, data: Any):
        self.compute_board_size()

    def _handle_transform_mouse_pos(self, data: Any):
        x, y = _parse_point(data)
        point = self.transform_mouse_pos(x, y)
        if point is not None:
            self.channel.send(ports.TRANSFORM_RESULT, point.to_payload())

    def _handle_board_mouse_pos(self, data: Any):
        x, y = _parse_point(data)
        point = self.board_mouse_pos(x, y)
        if point is not None:
            self.channel.send(ports.BOARD_MOUSE_POS_RESULT, point.to_payload())

    def _handle_save_state(self, data: Any):
        self.save_state(data)

    # =========================================================================
    # Board listeners
    # =========================================================================

    def _on_mouse_down(self, event: MouseEvent):
        event.prevent_default()
        self._forward_button(ports.POINTER_DOWN, event.which)

    def _on_mouse_up(self, event: MouseEvent):
        event.prevent_default()
        self._forward_button(ports.POINTER_UP, event.which)

    def _on_context_menu(self, event: MouseEvent):
        event.prevent_default()

    def _forward_button(self, port: str, which: int):
        if which in FORWARDED_BUTTONS:
            self.channel.send(port, which)


def _parse_point(data: Any) -> Sequence[float]:
    """
    Raises:
        BridgeError: If the payload isn't an [x, y] pair of numbers
    """
    if not isinstance(data, (list, tuple)) or len(data) != 2:
        raise BridgeError(f"Expected [x, y], got {data!r}")
    try:
        return float(data[0]), float(data[1])
    except (TypeError, ValueError) as e:
        raise BridgeError(f"Expected [x, y] numbers, got {data!r}") from e
