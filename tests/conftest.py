import json
import time

import pytest

from virtuoso_client.config import build_config
from virtuoso_client.sparql.transport import HttpResponse

SPARQL_JSON = "application/sparql-results+json"


def sparql_response(bindings=None, status=200) -> HttpResponse:
    body = json.dumps({"head": {"vars": ["s"]}, "results": {"bindings": bindings or []}})
    return HttpResponse(status_code=status, headers={"Content-Type": SPARQL_JSON}, body=body)


def ack_response(value: str) -> HttpResponse:
    body = json.dumps({
        "head": {"vars": ["callret-0"]},
        "results": {"bindings": [{"callret-0": {"type": "literal", "value": value}}]},
    })
    return HttpResponse(status_code=200, headers={"Content-Type": SPARQL_JSON}, body=body)


class RecordingTransport:
    """Returns a canned response and keeps every request it was given."""

    def __init__(self, response: HttpResponse | None = None):
        self.response = response or sparql_response()
        self.requests = []

    def send(self, request):
        self.requests.append(request)
        return self.response

    @property
    def last(self):
        return self.requests[-1]


class SlowTransport(RecordingTransport):
    def __init__(self, delay: float, response: HttpResponse | None = None):
        super().__init__(response)
        self.delay = delay

    def send(self, request):
        time.sleep(self.delay)
        return super().send(request)


class RaisingTransport:
    def __init__(self, exc: Exception):
        self.exc = exc

    def send(self, request):
        raise self.exc


@pytest.fixture()
def read_only_config():
    return build_config("http://db.example/sparql", auth_method="digest", timeout=5).data


@pytest.fixture()
def split_config():
    return build_config(
        "http://db.example/sparql",
        update_uri="http://db.example/sparql-auth",
        username="dba",
        password="secret",
        auth_method="basic",
    ).data


@pytest.fixture()
def transport():
    return RecordingTransport()
