"""
Browser Runtime

Async loop driving the input bridge, in the browser (pygbag) or natively.
Each frame it routes pygame mouse events to the board, delivers queued port
messages, and runs the callbacks deferred to the next animation frame.

Usage (development):
    python -m picross.browser.runtime
"""
import asyncio
from collections import deque
from typing import Any, Deque, Dict, List, Optional

import pygame

from . import ports
from .config import BridgeConfig
from .host import PygameBoard, PygameHost
from .input_bridge import InputBridge
from .platform_compat import drain_js_messages, js_log
from .ports import PortChannel
from .storage import LocalStore, default_store


class BrowserRuntime:
    """
    Owns the pygame host, the port channel and the bridge for one page.

    The game layer talks to it through post() (in-process) or the page's
    message queue (browser).
    """

    def __init__(
        self,
        host: PygameHost,
        channel: Optional[PortChannel] = None,
        config: Optional[BridgeConfig] = None,
        store: Optional[LocalStore] = None,
    ):
        self.host = host
        self.channel = channel or PortChannel()
        self.config = config or BridgeConfig()
        self.bridge = InputBridge(
            host,
            self.channel,
            self.config,
            store=store if store is not None else default_store(),
        )
        self.running = True
        self._inbox: Deque[Dict[str, Any]] = deque()

    def start(self):
        """Hand the saved progress to the game layer."""
        state = self.bridge.load_state()
        js_log(f"[BrowserRuntime] {len(state.done_levels)} completed levels restored")
        self.channel.send(ports.INIT, state.to_flags())

    def post(self, message: Dict[str, Any]):
        """Queue a message from the game layer for the next frame."""
        self._inbox.append(message)

    def step(self, events: Optional[List[pygame.event.Event]] = None) -> int:
        """
        Run one frame.

        Args:
            events: pygame events for this frame; read from the queue if None

        Returns:
            Number of port messages handled
        """
        if events is None:
            events = pygame.event.get()

        for event in events:
            if event.type == pygame.QUIT:
                self.running = False
                continue
            self.host.handle_pygame_event(event)

        handled = 0
        self._inbox.extend(drain_js_messages())
        while self._inbox:
            if self.channel.process_message(self._inbox.popleft()):
                handled += 1

        self.host.run_animation_frames()
        return handled

    async def run(self):
        """
        Main async loop.

        Must await asyncio.sleep(0) each frame to yield to the browser.
        """
        self.start()
        clock = pygame.time.Clock()
        while self.running:
            clock.tick(60)
            self.step()
            pygame.display.flip()
            await asyncio.sleep(0)


async def main():
    """Entry point: a full-window board."""
    pygame.init()
    pygame.display.set_caption("Picross")
    screen = pygame.display.set_mode((800, 800))

    config = BridgeConfig()
    host = PygameHost()
    host.mount(config.board_id, PygameBoard(screen.get_rect(), screen.get_size()))

    runtime = BrowserRuntime(host, config=config)
    js_log("[BrowserRuntime] Starting loop")
    await runtime.run()

    pygame.quit()


if __name__ == "__main__":
    asyncio.run(main())
