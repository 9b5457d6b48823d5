"""
Testing the secret source
- requests.get is replaced so no test ever touches the network.
"""

import requests

import guessnumber.random_client as random_client
from guessnumber import config
from guessnumber.engine import is_valid_code

class FakeResponse:
    def __init__(self, text: str, status: int = 200) -> None:
        self.text = text
        self.status_code = status

    def raise_for_status(self) -> None:
        if self.status_code >= 400:
            raise requests.HTTPError(f"{self.status_code} error")

def test_uses_random_org_digits(monkeypatch):
    monkeypatch.setattr(config, "USE_RANDOM_ORG", True)
    monkeypatch.setattr(random_client.requests, "get", lambda *a, **kw: FakeResponse("0\n3\n9\n2\n"))
    assert random_client.fetch_code(4) == "0392"

def test_falls_back_when_network_fails(monkeypatch):
    monkeypatch.setattr(config, "USE_RANDOM_ORG", True)

    def boom(*args, **kwargs):
        raise requests.ConnectionError("offline")

    monkeypatch.setattr(random_client.requests, "get", boom)
    assert is_valid_code(random_client.fetch_code(4))

def test_falls_back_on_bad_body(monkeypatch):
    monkeypatch.setattr(config, "USE_RANDOM_ORG", True)
    monkeypatch.setattr(random_client.requests, "get", lambda *a, **kw: FakeResponse("1\n2\n12\n"))
    assert is_valid_code(random_client.fetch_code(4))

def test_falls_back_on_http_error(monkeypatch):
    monkeypatch.setattr(config, "USE_RANDOM_ORG", True)
    monkeypatch.setattr(random_client.requests, "get", lambda *a, **kw: FakeResponse("", status=503))
    assert is_valid_code(random_client.fetch_code(4))

def test_local_only_skips_network(monkeypatch):
    monkeypatch.setattr(config, "USE_RANDOM_ORG", False)

    def must_not_call(*args, **kwargs):
        raise AssertionError("network used")

    monkeypatch.setattr(random_client.requests, "get", must_not_call)
    assert is_valid_code(random_client.fetch_code(4))
