"""Shared fixtures: fake page host and board for bridge tests."""

from __future__ import annotations

from collections import defaultdict
from typing import Callable, Dict, List, Optional

import pytest

from picross.browser.config import BridgeConfig
from picross.browser.host import BoardElement, Host, MouseEvent
from picross.browser.input_bridge import InputBridge
from picross.browser.ports import PortChannel
from picross.browser.primitives import Rectangle
from picross.browser.storage import MemoryStorage
from picross.browser.transform import ScreenTransform


class FakeBoard(BoardElement):
    def __init__(
        self,
        bbox: Rectangle = Rectangle(0, 0, 100, 50),
        client_rect: Rectangle = Rectangle(20, 30, 200, 100),
        ctm: Optional[ScreenTransform] = None,
    ):
        self.bbox = bbox
        self.client_rect = client_rect
        self.ctm = ctm or ScreenTransform.from_components(2, 0, 0, 2, 20, 30)
        self.listeners: Dict[str, List[Callable]] = defaultdict(list)

    def get_bbox(self) -> Rectangle:
        return self.bbox

    def get_bounding_client_rect(self) -> Rectangle:
        return self.client_rect

    def get_screen_ctm(self) -> ScreenTransform:
        return self.ctm

    def add_event_listener(self, event_type, listener):
        self.listeners[event_type].append(listener)

    def fire(self, event_type: str, which: int) -> MouseEvent:
        event = MouseEvent(event_type, which)
        for listener in self.listeners[event_type]:
            listener(event)
        return event


class FakeHost(Host):
    def __init__(self, board: Optional[FakeBoard] = None):
        self.board = board
        self.frames: List[Callable] = []

    def get_element_by_id(self, element_id):
        return self.board if element_id == "board" else None

    def request_animation_frame(self, callback):
        self.frames.append(callback)

    def flush_frames(self):
        frames, self.frames = self.frames, []
        for cb in frames:
            cb()


@pytest.fixture()
def sent() -> List[dict]:
    return []


@pytest.fixture()
def channel(sent: List[dict]) -> PortChannel:
    return PortChannel(sink=sent.append)


@pytest.fixture()
def board() -> FakeBoard:
    return FakeBoard()


@pytest.fixture()
def host(board: FakeBoard) -> FakeHost:
    return FakeHost(board)


@pytest.fixture()
def store() -> MemoryStorage:
    return MemoryStorage()


@pytest.fixture()
def bridge(host: FakeHost, channel: PortChannel, store: MemoryStorage) -> InputBridge:
    return InputBridge(host, channel, BridgeConfig(), store=store)
