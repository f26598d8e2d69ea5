"""
Platform Compatibility Utilities

Detects whether the bridge runs in the browser (pygbag/Emscripten) or in
native Python, and wraps the few window APIs the bridge needs.
"""
import json
import sys
from typing import Any, Dict, List, Optional

from picross.logging import get_logger

log = get_logger('browser')

# Global array the host page pushes JSON messages into
INBOX_NAME = 'picrossMessages'
MESSAGE_SOURCE = 'picross'


def is_browser() -> bool:
    """
    Check if running in browser (Emscripten/WebAssembly).

    Returns:
        True if running in browser, False otherwise
    """
    return sys.platform == "emscripten"


def get_window() -> Optional[Any]:
    """Return the JS window object, or None outside the browser."""
    if not is_browser():
        return None

    import platform as browser_platform
    return browser_platform.window


def js_log(msg: str) -> None:
    """Log through the picross logger and, in the browser, the JS console."""
    log.info(msg)
    window = get_window()
    if window is not None:
        try:
            window.console.log(msg)
        except Exception as e:
            log.debug("console.log failed: %s", e)


def get_browser_storage() -> Optional[Any]:
    """
    Get browser localStorage for persistent storage.

    Returns:
        localStorage object or None if not in browser
    """
    window = get_window()
    if window is None:
        return None
    return getattr(window, 'localStorage', None)


def post_to_parent(message: Dict[str, Any]) -> None:
    """
    Send a message to the parent JavaScript frame.

    Outside the browser the message is only logged.
    """
    window = get_window()
    if window is None:
        log.debug("[JS Bridge] %s: %s", message.get('type'), message.get('data'))
        return

    window.parent.postMessage(json.dumps(dict(message, source=MESSAGE_SOURCE)), '*')


def drain_js_messages() -> List[Dict[str, Any]]:
    """
    Take all pending messages the page queued for Python.

    Malformed entries are logged and dropped.
    """
    window = get_window()
    if window is None or not hasattr(window, INBOX_NAME):
        return []

    messages = getattr(window, INBOX_NAME)
    drained = []
    while len(messages) > 0:
        msg_str = messages.shift()
        try:
            msg = json.loads(str(msg_str))
        except json.JSONDecodeError:
            log.warning("Dropping malformed message from page: %r", msg_str)
            continue
        if isinstance(msg, dict):
            drained.append(msg)
    return drained
