"""Tests for the shared helpers: config, ports, transforms, loader, logging."""

from __future__ import annotations

import io
import json
import logging
from pathlib import Path

import numpy as np
import pytest

from picross import yaml as loader
from picross.browser.config import BridgeConfig
from picross.browser.ports import ERROR, PortChannel
from picross.browser.primitives import Point2D, Rectangle
from picross.browser.transform import ScreenTransform, screen_to_board_offset
from picross.errors import BridgeError
from picross.logging import configure_logging, get_logger


# ---------------------------------------------------------------------------
# BridgeConfig
# ---------------------------------------------------------------------------

class TestBridgeConfig:
    def test_defaults(self):
        c = BridgeConfig()
        assert (c.board_id, c.transform_mode, c.board_pos_mode, c.storage_key) == (
            "board", "matrix", "rect-offset", "picross-elm")

    def test_invalid_mode(self):
        with pytest.raises(ValueError, match="transform_mode"):
            BridgeConfig(transform_mode="affine")

    def test_from_dict_ignores_unknown(self):
        c = BridgeConfig.from_dict({"board_id": "grid", "colour": "red"})
        assert c.board_id == "grid"


# ---------------------------------------------------------------------------
# PortChannel
# ---------------------------------------------------------------------------

class TestPortChannel:
    def test_routes_payload(self):
        got = []
        ch = PortChannel(sink=lambda m: None)
        ch.subscribe("ping", got.append)
        assert ch.process_message({"type": "ping", "data": [1, 2]})
        assert got == [[1, 2]]

    def test_unknown_port(self):
        ch = PortChannel(sink=lambda m: None)
        assert not ch.process_message({"type": "nope"})
        assert not ch.has_handler("nope")

    def test_handler_error_reported(self):
        sent = []
        ch = PortChannel(sink=sent.append)

        def boom(data):
            raise RuntimeError("bad")

        ch.subscribe("ping", boom)
        assert not ch.process_message({"type": "ping"})
        assert sent == [{"type": ERROR, "data": {"port": "ping", "message": "bad"}}]

    def test_default_sink_outside_browser(self):
        PortChannel().send("anything", [1])


# ---------------------------------------------------------------------------
# ScreenTransform
# ---------------------------------------------------------------------------

class TestScreenTransform:
    def test_components_round_trip(self):
        t = ScreenTransform.from_components(1, 2, 3, 4, 5, 6)
        assert tuple(t.components()) == (1, 2, 3, 4, 5, 6)

    def test_identity(self):
        assert ScreenTransform.identity().apply(Point2D(3, 4)) == Point2D(3.0, 4.0)

    def test_inverse_undoes_apply(self):
        t = ScreenTransform.from_components(1.5, 0.2, -0.3, 0.8, 12, -7)
        p = t.inverse().apply(t.apply(Point2D(9, 4)))
        assert p.x == pytest.approx(9)
        assert p.y == pytest.approx(4)

    def test_singular(self):
        with pytest.raises(BridgeError, match="not invertible"):
            ScreenTransform.from_components(1, 2, 2, 4, 0, 0).inverse()

    def test_bad_shape(self):
        with pytest.raises(ValueError):
            ScreenTransform(np.eye(2))

    def test_offset(self):
        assert screen_to_board_offset(Rectangle(10, 20, 5, 5), Point2D(15, 21)) == Point2D(5, 1)


# ---------------------------------------------------------------------------
# picross.yaml loader
# ---------------------------------------------------------------------------

class TestLoader:
    def test_format_detection(self, tmp_path: Path):
        y = tmp_path / "a.yml"
        y.write_text("x: 1\n", encoding="utf-8")
        j = tmp_path / "a.json"
        j.write_text('{"x": 2}', encoding="utf-8")
        assert loader.load(y) == {"x": 1}
        assert loader.load(j) == {"x": 2}

    def test_dump_json_layout(self, tmp_path: Path):
        path = tmp_path / "out.json"
        loader.dump({"name": "é", "content": [[1]]}, path)
        text = path.read_text(encoding="utf-8")
        assert text == '{\n  "name": "é",\n  "content": [\n    [\n      1\n    ]\n  ]\n}'

    def test_dumps_yaml(self):
        assert loader.loads(loader.dumps({"a": [1, 2]}, format="yaml"), format="yaml") == {"a": [1, 2]}

    def test_file_object(self):
        buf = io.StringIO()
        loader.dump([1, 2], buf)
        assert json.loads(buf.getvalue()) == [1, 2]
        assert loader.load(io.StringIO("[3]")) == [3]


# ---------------------------------------------------------------------------
# Logging
# ---------------------------------------------------------------------------

class TestLogging:
    def test_get_logger_namespace(self):
        assert get_logger("bundle").name == "picross.bundle"
        assert get_logger("picross.x").name == "picross.x"

    def test_configure_idempotent(self):
        root = configure_logging("DEBUG")
        count = len(root.handlers)
        configure_logging("WARNING")
        assert len(root.handlers) == count
        assert root.level == logging.WARNING

    def test_env_level(self, monkeypatch: pytest.MonkeyPatch):
        monkeypatch.setenv("PICROSS_LOG_LEVEL", "ERROR")
        assert configure_logging().level == logging.ERROR
        monkeypatch.setenv("PICROSS_LOG_LEVEL", "bogus")
        assert configure_logging().level == logging.INFO
