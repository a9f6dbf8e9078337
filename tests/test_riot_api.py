import pytest
import requests

import riot_api
from riot_api import RateLimiter, RiotAPIClient, TransientAPIError


class FakeResponse:
    def __init__(self, status_code, payload=None, headers=None):
        self.status_code = status_code
        self._payload = payload
        self.headers = headers or {}
        self.text = str(payload)

    def json(self):
        return self._payload

    def raise_for_status(self):
        if self.status_code >= 400:
            raise requests.exceptions.HTTPError(f"{self.status_code} error")


class FakeSession:
    def __init__(self, responses):
        self.responses = list(responses)
        self.headers = {}
        self.calls = []
        self.closed = False

    def get(self, url, params=None, timeout=None):
        self.calls.append((url, params))
        return self.responses.pop(0)

    def close(self):
        self.closed = True


@pytest.fixture(autouse=True)
def no_sleep(monkeypatch):
    monkeypatch.setattr(riot_api.time, "sleep", lambda seconds: None)


def _client(responses):
    session = FakeSession(responses)
    return RiotAPIClient(api_key="test-key", session=session), session


def test_client_requires_api_key(monkeypatch) -> None:
    monkeypatch.setattr(riot_api.config, "RIOT_API_KEY", "")
    with pytest.raises(ValueError):
        RiotAPIClient()


def test_client_sets_token_header() -> None:
    _, session = _client([])
    assert session.headers["X-Riot-Token"] == "test-key"


def test_match_ids_request_uses_regional_routing() -> None:
    client, session = _client([FakeResponse(200, ["EUW1_2", "EUW1_1"])])
    ids = client.get_match_ids_by_puuid("EUW", "abc", queue=420, start=100, count=100)

    assert ids == ["EUW1_2", "EUW1_1"]
    url, params = session.calls[0]
    assert url == "https://europe.api.riotgames.com/lol/match/v5/matches/by-puuid/abc/ids"
    assert params == {"start": 100, "count": 100, "queue": 420}


def test_account_lookup_quotes_riot_id() -> None:
    client, session = _client([FakeResponse(200, {"puuid": "abc"})])
    assert client.get_account_by_riot_id("NA", "Some Name", "NA1") == {"puuid": "abc"}
    assert session.calls[0][0] == (
        "https://americas.api.riotgames.com/riot/account/v1/accounts/by-riot-id/Some%20Name/NA1"
    )


def test_not_found_returns_none() -> None:
    client, _ = _client([FakeResponse(404)])
    assert client.get_match("EUW", "EUW1_1") is None


def test_rate_limited_request_is_retried() -> None:
    client, session = _client([
        FakeResponse(429, headers={"Retry-After": "2"}),
        FakeResponse(200, {"metadata": {"matchId": "EUW1_1"}}),
    ])
    assert client.get_match("EUW", "EUW1_1") == {"metadata": {"matchId": "EUW1_1"}}
    assert len(session.calls) == 2


def test_persistent_server_errors_raise_transient_error() -> None:
    client, session = _client([FakeResponse(503), FakeResponse(502), FakeResponse(503)])
    with pytest.raises(TransientAPIError):
        client.get_match("EUW", "EUW1_1")
    assert len(session.calls) == 3


def test_forbidden_raises_http_error() -> None:
    client, _ = _client([FakeResponse(403)])
    with pytest.raises(requests.exceptions.HTTPError):
        client.get_match("EUW", "EUW1_1")


def test_empty_match_id_page_on_not_found() -> None:
    client, _ = _client([FakeResponse(404)])
    assert client.get_match_ids_by_puuid("EUW", "abc") == []


def test_rate_limiter_waits_when_window_is_full() -> None:
    limiter = RateLimiter("match-v5", "EUW", {"per_second": 2, "per_2min": 100})
    assert limiter.wait_if_needed() == 0.0
    assert limiter.wait_if_needed() == 0.0
    assert limiter.wait_if_needed() > 0.0
