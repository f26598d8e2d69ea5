"""
Picross Browser Bridge Package

Connects the host page to the game layer's ports.

Modules:
    input_bridge.py - board size, mouse transforms and pointer events
    ports.py - port channel (message routing)
    host.py - pygame and DOM page adapters
    storage.py - saved progress in local storage
    runtime.py - async loop for pygbag
    platform_compat.py - platform detection utilities
"""
from .config import BridgeConfig
from .input_bridge import BridgeSession, InputBridge
from .ports import PortChannel
from .primitives import BoardGeometry, Point2D, Rectangle

__all__ = [
    "BridgeConfig",
    "BridgeSession",
    "InputBridge",
    "PortChannel",
    "BoardGeometry",
    "Point2D",
    "Rectangle",
]
