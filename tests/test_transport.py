import json
import threading
from http.server import BaseHTTPRequestHandler, ThreadingHTTPServer
from urllib.parse import parse_qs, urlsplit

import pytest
import requests

from virtuoso_client.config import AuthMode, build_config
from virtuoso_client.result import ErrorKind
from virtuoso_client.sparql.auth import NO_AUTH, AuthOptions
from virtuoso_client.sparql.client import SparqlClient
from virtuoso_client.sparql.transport import HttpRequest, HttpResponse, RequestsTransport


def _request(**kwargs):
    defaults = {
        "method": "GET",
        "url": "http://db.example/sparql",
        "headers": {"Accept": "application/sparql-results+json"},
        "params": {"query": "SELECT * WHERE { ?s ?p ?o }", "format": "application/sparql-results+json"},
    }
    defaults.update(kwargs)
    return HttpRequest(**defaults)


def test_get_encodes_params_in_url():
    prepared = RequestsTransport().prepare(_request())
    parts = urlsplit(prepared.url)
    assert prepared.method == "GET"
    assert parts.path == "/sparql"
    assert parse_qs(parts.query) == {
        "query": ["SELECT * WHERE { ?s ?p ?o }"],
        "format": ["application/sparql-results+json"],
    }
    assert prepared.body is None
    assert "Authorization" not in prepared.headers


def test_post_form_encodes_body():
    prepared = RequestsTransport().prepare(
        _request(method="POST", params={"format": "application/sparql-results+json"}, data={"query": "CLEAR GRAPH <urn:g>"})
    )
    assert prepared.headers["Content-Type"] == "application/x-www-form-urlencoded"
    assert parse_qs(prepared.body) == {"query": ["CLEAR GRAPH <urn:g>"]}
    assert parse_qs(urlsplit(prepared.url).query) == {"format": ["application/sparql-results+json"]}


def test_basic_auth_sets_authorization_header():
    auth = AuthOptions(mode=AuthMode.BASIC, username="dba", password="secret")
    prepared = RequestsTransport().prepare(_request(auth=auth))
    assert prepared.headers["Authorization"].startswith("Basic ")


def test_digest_auth_waits_for_challenge():
    auth = AuthOptions(mode=AuthMode.DIGEST, username="dba", password="secret")
    prepared = RequestsTransport().prepare(_request(auth=auth))
    assert "Authorization" not in prepared.headers
    assert prepared.hooks["response"]


def test_no_auth_adds_nothing():
    prepared = RequestsTransport().prepare(_request(auth=NO_AUTH))
    assert "Authorization" not in prepared.headers


def test_send_wraps_requests_response(monkeypatch):
    captured = {}

    def fake_send(self, prepared, **kwargs):
        captured.update(kwargs)
        resp = requests.Response()
        resp.status_code = 200
        resp.headers["Content-Type"] = "application/sparql-results+json"
        resp._content = b'{"results": {"bindings": []}}'
        resp.encoding = "utf-8"
        return resp

    monkeypatch.setattr(requests.Session, "send", fake_send)
    response = RequestsTransport(verify=False).send(_request(timeout=3.0))

    assert response.status_code == 200
    assert response.content_type == "application/sparql-results+json"
    assert response.body == '{"results": {"bindings": []}}'
    assert captured == {"timeout": 3.0, "verify": False, "allow_redirects": False}


def test_default_verification_uses_certifi(monkeypatch):
    import certifi

    captured = {}

    def fake_send(self, prepared, **kwargs):
        captured.update(kwargs)
        resp = requests.Response()
        resp.status_code = 204
        resp._content = b""
        return resp

    monkeypatch.setattr(requests.Session, "send", fake_send)
    RequestsTransport().send(_request())
    assert captured["verify"] == certifi.where()


def test_content_type_strips_parameters():
    response = HttpResponse(status_code=200, headers={"content-type": "Application/Sparql-Results+JSON; charset=UTF-8"})
    assert response.content_type == "application/sparql-results+json"
    assert HttpResponse(status_code=200).content_type == ""


class _RedirectingHandler(BaseHTTPRequestHandler):
    """POST /sparql-auth answers 302 to /moved; /loop redirects to itself."""

    seen = []

    def log_message(self, format, *args):
        pass

    def _reply(self, status, body=b"", location=None):
        self.send_response(status)
        if location:
            self.send_header("Location", location)
        self.send_header("Content-Type", "application/sparql-results+json")
        self.send_header("Content-Length", str(len(body)))
        self.end_headers()
        self.wfile.write(body)

    def _handle(self):
        length = int(self.headers.get("Content-Length") or 0)
        body = self.rfile.read(length).decode("utf-8")
        self.seen.append((self.command, urlsplit(self.path).path, body))
        path = urlsplit(self.path).path
        if path == "/sparql-auth":
            self._reply(302, location="/moved")
        elif path == "/loop":
            self._reply(301, location="/loop")
        else:
            ack = {"results": {"bindings": [{"callret-0": {"value": "Insert into <urn:g>, 1 triples -- done"}}]}}
            self._reply(200, json.dumps(ack).encode("utf-8"))

    do_GET = _handle
    do_POST = _handle


@pytest.fixture()
def redirecting_server(monkeypatch):
    monkeypatch.setenv("NO_PROXY", "127.0.0.1")
    monkeypatch.setenv("no_proxy", "127.0.0.1")
    _RedirectingHandler.seen = []
    server = ThreadingHTTPServer(("127.0.0.1", 0), _RedirectingHandler)
    thread = threading.Thread(target=server.serve_forever, daemon=True)
    thread.start()
    yield f"http://127.0.0.1:{server.server_address[1]}", _RedirectingHandler.seen
    server.shutdown()
    server.server_close()


def test_redirected_write_stays_a_post_with_its_body(redirecting_server):
    base, seen = redirecting_server
    cfg = build_config(f"{base}/sparql", update_uri=f"{base}/sparql-auth", auth_method="none").data

    with SparqlClient(cfg) as client:
        result = client.insert_data("INSERT DATA { <a> <b> <c> }")

    assert result.ok
    assert result.data == "Insert into <urn:g>, 1 triples -- done"
    form = "query=INSERT+DATA+%7B+%3Ca%3E+%3Cb%3E+%3Cc%3E+%7D"
    assert seen == [("POST", "/sparql-auth", form), ("POST", "/moved", form)]


def test_redirect_loop_is_a_transport_failure(redirecting_server):
    base, _ = redirecting_server
    session = requests.Session()
    session.max_redirects = 3
    transport = RequestsTransport(session=session)

    with pytest.raises(requests.TooManyRedirects):
        transport.send(_request(method="POST", url=f"{base}/loop", params={}, data={"query": "CLEAR GRAPH <urn:g>"}))

    cfg = build_config(f"{base}/loop", auth_method="none").data
    result = SparqlClient(cfg, transport=transport).clear("CLEAR GRAPH <urn:g>")
    assert result.kind is ErrorKind.TRANSPORT_FAILURE
