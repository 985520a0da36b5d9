import threading
from http.server import BaseHTTPRequestHandler, ThreadingHTTPServer

import pytest


@pytest.fixture(autouse=True)
def isolated_env(tmp_path, monkeypatch):
    monkeypatch.setenv("COMPANION_DATA_FILE", str(tmp_path / "data.json"))
    monkeypatch.setenv("COMPANION_AUDIT_DIR", str(tmp_path / "audit"))
    monkeypatch.setenv("COMPANION_TIMEOUT", "5")
    return tmp_path


class _Handler(BaseHTTPRequestHandler):
    def _reply(self):
        length = int(self.headers.get("Content-Length") or 0)
        body = self.rfile.read(length).decode("utf-8") if length else ""
        self.server.seen.append({
            "method": self.command,
            "path": self.path,
            "headers": dict(self.headers),
            "body": body,
        })
        code = 500 if self.path.startswith("/fail") else 200
        self.send_response(code)
        self.send_header("Content-Type", "text/plain")
        self.end_headers()
        self.wfile.write(b"this body is never stored")

    do_GET = do_POST = do_PUT = do_DELETE = do_PATCH = _reply

    def log_message(self, format, *args):
        pass


@pytest.fixture
def remote():
    """A local HTTP endpoint standing in for the remote target; records what it receives."""
    srv = ThreadingHTTPServer(("127.0.0.1", 0), _Handler)
    srv.seen = []
    t = threading.Thread(target=srv.serve_forever, daemon=True)
    t.start()
    yield srv
    srv.shutdown()
    srv.server_close()


@pytest.fixture
def remote_url(remote):
    host, port = remote.server_address[:2]
    return f"http://{host}:{port}"
