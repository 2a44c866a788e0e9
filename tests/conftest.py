import pytest

from mc_legacy_ping import status_fe

from .helpers import ScriptedServer


@pytest.fixture
def scripted_server(monkeypatch):
    def install(data, eof=True):
        server = ScriptedServer(data, eof=eof)

        async def fake_connect(cls, host, port, timeout_ms=None, deadline=None):
            return await server.connect(host, port, timeout_ms, deadline)

        monkeypatch.setattr(status_fe.TCPConnection, "connect", classmethod(fake_connect))
        return server

    return install


@pytest.fixture
def srv_calls(monkeypatch):
    """Records resolve_srv calls; answers with ``srv_calls.result``."""

    class Recorder:
        result = None
        error = None

        def __init__(self):
            self.calls = []
            self.timeouts = []

    recorder = Recorder()

    async def fake_resolve_srv(host, timeout=None):
        recorder.calls.append(host)
        recorder.timeouts.append(timeout)
        if recorder.error is not None:
            raise recorder.error
        return recorder.result

    monkeypatch.setattr(status_fe, "resolve_srv", fake_resolve_srv)
    return recorder
