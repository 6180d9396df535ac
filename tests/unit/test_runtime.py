"""Unit tests for the githunter.runtime module."""

from __future__ import annotations

import typing as typ
from http import HTTPStatus

import falcon.asgi
import falcon.testing
import granian
import pytest
from granian.constants import Interfaces

from githunter import runtime
from githunter.runtime import _parse_port, create_app


class _RecordingGranian:
    """Granian stand-in capturing its constructor arguments."""

    instances: typ.ClassVar[list[_RecordingGranian]] = []

    def __init__(self, target: str, **kwargs: object) -> None:
        self.target = target
        self.kwargs = kwargs
        self.served = False
        _RecordingGranian.instances.append(self)

    def serve(self) -> None:
        self.served = True


@pytest.fixture
def recording_granian(monkeypatch: pytest.MonkeyPatch) -> type[_RecordingGranian]:
    """Replace Granian with a recorder and stub out logging setup."""
    _RecordingGranian.instances = []
    monkeypatch.setattr(granian, "Granian", _RecordingGranian)
    monkeypatch.setattr(runtime, "configure_logging", lambda level: ("INFO", False))
    return _RecordingGranian


class TestCreateApp:
    """Tests for the create_app factory function."""

    def test_health_only_mode(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """GITHUNTER_HEALTH_ONLY serves just the probes."""
        monkeypatch.setenv("GITHUNTER_HEALTH_ONLY", "true")
        client = falcon.testing.TestClient(create_app())

        assert client.simulate_get("/health").status_code == HTTPStatus.OK, (
            "expected /health"
        )
        assert client.simulate_get("/ready").json == {"status": "ready"}, (
            "expected readiness without cache detail"
        )
        assert (
            client.simulate_get("/user/octocat").status_code == HTTPStatus.NOT_FOUND
        ), "expected no domain routes"

    def test_full_mode_builds_app(self) -> None:
        """Without the flag, the full application is built from the environment."""
        app = create_app()

        assert isinstance(app, falcon.asgi.App), "expected Falcon ASGI App"


class TestParsePort:
    """Tests for port validation."""

    @pytest.mark.parametrize(("raw", "port"), [("1", 1), ("5000", 5000), ("65535", 65535)])
    def test_valid(self, raw: str, port: int) -> None:
        """Ports inside 1-65535 parse."""
        assert _parse_port(raw) == port, "expected the parsed port"

    @pytest.mark.parametrize("raw", ["0", "65536", "-1", "http", ""])
    def test_invalid_exits(self, raw: str) -> None:
        """Invalid ports stop the process with status 1."""
        with pytest.raises(SystemExit) as excinfo:
            _parse_port(raw)
        assert excinfo.value.code == 1, "expected exit status 1"


class TestMain:
    """Tests for the Granian entrypoint."""

    def test_defaults(self, recording_granian: type[_RecordingGranian]) -> None:
        """The server binds 0.0.0.0:5000 with the ASGI factory."""
        runtime.main()

        (server,) = recording_granian.instances
        assert server.target == "githunter.runtime:create_app", "expected factory"
        assert server.kwargs == {
            "address": "0.0.0.0",  # noqa: S104 - asserting the container default
            "port": 5000,
            "interface": Interfaces.ASGI,
            "factory": True,
        }, "expected default bind settings"
        assert server.served, "expected the server started"

    def test_environment_overrides(
        self,
        recording_granian: type[_RecordingGranian],
        monkeypatch: pytest.MonkeyPatch,
    ) -> None:
        """Host and port come from the environment."""
        monkeypatch.setenv("GITHUNTER_HOST", "127.0.0.1")
        monkeypatch.setenv("GITHUNTER_PORT", "8080")

        runtime.main()

        (server,) = recording_granian.instances
        assert server.kwargs["address"] == "127.0.0.1", "expected the host"
        assert server.kwargs["port"] == 8080, "expected the port"
