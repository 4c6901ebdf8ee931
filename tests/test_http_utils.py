"""Tests for utils/http.py: retry configuration, session management and get_json."""

import pytest
import requests

from utils.http import RetryStrategy, SessionManager, get_json


class TestRetryStrategy:
    def test_defaults(self):
        retry = RetryStrategy().get_retry_object()
        assert retry.total == 2
        assert 503 in retry.status_forcelist
        assert "GET" in retry.allowed_methods

    def test_custom(self):
        strategy = RetryStrategy(max_retries=5, status_forcelist=[500])
        retry = strategy.get_retry_object()
        assert retry.total == 5
        assert list(retry.status_forcelist) == [500]


class TestSessionManager:
    def test_lazy_session_reused(self):
        manager = SessionManager()
        first = manager.session
        assert isinstance(first, requests.Session)
        assert manager.session is first
        manager.close()

    def test_adapters_mounted(self):
        with SessionManager() as manager:
            adapter = manager.session.get_adapter("http://localhost:5000/api/data")
            assert adapter.max_retries.total == 2

    def test_close_resets(self):
        manager = SessionManager()
        first = manager.session
        manager.close()
        assert manager.session is not first
        manager.close()


class _Response:
    def __init__(self, status_code, payload):
        self.status_code = status_code
        self._payload = payload

    def raise_for_status(self):
        if self.status_code >= 400:
            raise requests.HTTPError(str(self.status_code))

    def json(self):
        return self._payload


class _Session:
    def __init__(self, response):
        self.response = response
        self.kwargs = None

    def get(self, url, **kwargs):
        self.kwargs = kwargs
        return self.response


class TestGetJson:
    def test_returns_payload(self):
        session = _Session(_Response(200, {"success": True}))
        assert get_json(session, "http://x/api/data", params={"a": "1"}, timeout=2) == {"success": True}
        assert session.kwargs == {"params": {"a": "1"}, "timeout": 2}

    def test_empty_params_sent_as_none(self):
        session = _Session(_Response(200, []))
        get_json(session, "http://x/api/data", params={})
        assert session.kwargs["params"] is None

    def test_http_error_raised(self):
        with pytest.raises(requests.HTTPError):
            get_json(_Session(_Response(500, {})), "http://x/api/data")
