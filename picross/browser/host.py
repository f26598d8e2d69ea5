"""
Host adapters - the page-side objects the input bridge talks to.

The bridge only needs a way to find the board element, measure it, listen to
its mouse events and defer work to the next rendered frame. Two hosts
provide that:

- PygameHost: the board is a rectangle on the pygame display; mouse button
  events are routed from the pygame event queue.
- BrowserHost: the board is an SVG element of the page (pygbag only).
"""
from abc import ABC, abstractmethod
from collections import defaultdict
from typing import Any, Callable, Dict, List, Optional, Tuple

import pygame

from picross.logging import get_logger
from .platform_compat import get_window
from .primitives import Point2D, Rectangle
from .transform import ScreenTransform

log = get_logger('host')

MOUSEDOWN = 'mousedown'
MOUSEUP = 'mouseup'
CONTEXTMENU = 'contextmenu'

# Secondary button in 'which' numbering (1 primary, 2 middle, 3 secondary)
SECONDARY_BUTTON = 3


class MouseEvent:
    """
    Minimal DOM-style mouse event.

    'which' uses the 1/2/3 numbering shared by pygame and legacy DOM events.
    """

    def __init__(self, event_type: str, which: int, position: Optional[Point2D] = None):
        self.type = event_type
        self.which = which
        self.position = position
        self.default_prevented = False

    def prevent_default(self):
        self.default_prevented = True

    def __repr__(self) -> str:
        return f"MouseEvent({self.type!r}, which={self.which})"


Listener = Callable[[MouseEvent], None]


class BoardElement(ABC):
    """The rendered board the game layer draws into."""

    @abstractmethod
    def get_bbox(self) -> Rectangle:
        """Content bounding box in board-local units."""

    @abstractmethod
    def get_bounding_client_rect(self) -> Rectangle:
        """Rendered box in screen coordinates."""

    @abstractmethod
    def get_screen_ctm(self) -> ScreenTransform:
        """Current board-to-screen transform."""

    @abstractmethod
    def add_event_listener(self, event_type: str, listener: Listener):
        """Attach a mouse event listener."""


class Host(ABC):
    """The page hosting the board."""

    @abstractmethod
    def get_element_by_id(self, element_id: str) -> Optional[BoardElement]:
        """Find a mounted element, or None."""

    @abstractmethod
    def request_animation_frame(self, callback: Callable[[], None]):
        """Run callback once, before the next frame is drawn."""


# =============================================================================
# pygame host
# =============================================================================

class PygameBoard(BoardElement):
    """
    Board drawn into a rectangle of the pygame display.

    Board-local units are content cells scaled to fill the rectangle, so the
    screen transform is a scale plus a translation.
    """

    def __init__(self, rect: pygame.Rect, content_size: Tuple[float, float]):
        """
        Args:
            rect: Screen rectangle the board occupies
            content_size: Board size in local units (width, height)
        """
        self.rect = pygame.Rect(rect)
        self.content_size = content_size
        self._listeners: Dict[str, List[Listener]] = defaultdict(list)

    def get_bbox(self) -> Rectangle:
        width, height = self.content_size
        return Rectangle(0.0, 0.0, float(width), float(height))

    def get_bounding_client_rect(self) -> Rectangle:
        return Rectangle(float(self.rect.x), float(self.rect.y),
                         float(self.rect.width), float(self.rect.height))

    def get_screen_ctm(self) -> ScreenTransform:
        width, height = self.content_size
        sx = self.rect.width / width if width else 0.0
        sy = self.rect.height / height if height else 0.0
        return ScreenTransform.from_components(sx, 0.0, 0.0, sy, self.rect.x, self.rect.y)

    def add_event_listener(self, event_type: str, listener: Listener):
        self._listeners[event_type].append(listener)

    def listener_count(self, event_type: str) -> int:
        return len(self._listeners.get(event_type, ()))

    def dispatch(self, event: MouseEvent) -> MouseEvent:
        for listener in list(self._listeners.get(event.type, ())):
            listener(event)
        return event


class PygameHost(Host):
    """
    Host backed by the pygame event loop.

    Animation frame callbacks are queued and run by run_animation_frames(),
    which the runtime calls once per loop iteration.
    """

    def __init__(self):
        self._elements: Dict[str, PygameBoard] = {}
        self._frame_callbacks: List[Callable[[], None]] = []

    def mount(self, element_id: str, board: PygameBoard):
        self._elements[element_id] = board

    def unmount(self, element_id: str):
        self._elements.pop(element_id, None)

    def get_element_by_id(self, element_id: str) -> Optional[PygameBoard]:
        return self._elements.get(element_id)

    def request_animation_frame(self, callback: Callable[[], None]):
        self._frame_callbacks.append(callback)

    @property
    def pending_frames(self) -> int:
        return len(self._frame_callbacks)

    def run_animation_frames(self) -> int:
        """
        Run the callbacks queued so far, in order.

        Callbacks queued while running wait for the next frame.

        Returns:
            Number of callbacks run
        """
        callbacks, self._frame_callbacks = self._frame_callbacks, []
        for callback in callbacks:
            callback()
        return len(callbacks)

    def handle_pygame_event(self, event: pygame.event.Event) -> List[MouseEvent]:
        """
        Route a pygame mouse button event to the board under the cursor.

        A secondary-button press also raises 'contextmenu', as browsers do.

        Returns:
            The DOM-style events dispatched
        """
        if event.type == pygame.MOUSEBUTTONDOWN:
            event_type = MOUSEDOWN
        elif event.type == pygame.MOUSEBUTTONUP:
            event_type = MOUSEUP
        else:
            return []

        position = Point2D(float(event.pos[0]), float(event.pos[1]))
        dispatched = []
        for board in self._elements.values():
            if not board.get_bounding_client_rect().contains_point(position):
                continue
            dispatched.append(board.dispatch(MouseEvent(event_type, event.button, position)))
            if event_type == MOUSEDOWN and event.button == SECONDARY_BUTTON:
                dispatched.append(board.dispatch(MouseEvent(CONTEXTMENU, event.button, position)))
        return dispatched


# =============================================================================
# Browser host (pygbag)
# =============================================================================

class _DomMouseEvent(MouseEvent):
    """MouseEvent wrapping a JS event object."""

    def __init__(self, js_event: Any):
        super().__init__(str(js_event.type), int(js_event.which))
        self._js_event = js_event

    def prevent_default(self):
        super().prevent_default()
        self._js_event.preventDefault()


class DomBoard(BoardElement):
    """Board backed by an SVG element of the page."""

    def __init__(self, element: Any):
        self._element = element

    def get_bbox(self) -> Rectangle:
        box = self._element.getBBox()
        return Rectangle(float(box.x), float(box.y), float(box.width), float(box.height))

    def get_bounding_client_rect(self) -> Rectangle:
        rect = self._element.getBoundingClientRect()
        return Rectangle(float(rect.left), float(rect.top), float(rect.width), float(rect.height))

    def get_screen_ctm(self) -> ScreenTransform:
        m = self._element.getScreenCTM()
        return ScreenTransform.from_components(
            float(m.a), float(m.b), float(m.c), float(m.d), float(m.e), float(m.f)
        )

    def add_event_listener(self, event_type: str, listener: Listener):
        self._element.addEventListener(event_type, lambda js_event: listener(_DomMouseEvent(js_event)))


class BrowserHost(Host):
    """Host backed by the page document. Only usable under pygbag."""

    def __init__(self, window: Optional[Any] = None):
        self._window = window if window is not None else get_window()
        if self._window is None:
            raise RuntimeError("BrowserHost requires a browser window (pygbag)")

    def get_element_by_id(self, element_id: str) -> Optional[DomBoard]:
        element = self._window.document.getElementById(element_id)
        if element is None:
            return None
        return DomBoard(element)

    def request_animation_frame(self, callback: Callable[[], None]):
        self._window.requestAnimationFrame(lambda *_: callback())
