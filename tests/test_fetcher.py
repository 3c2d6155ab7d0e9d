"""
Tests for DocumentFetcher. curl_cffi is patched; no real requests are made.
"""
from unittest.mock import MagicMock

import pytest
from curl_cffi.requests.exceptions import ConnectionError as CurlConnectionError
from curl_cffi.requests.exceptions import Timeout

import boxd_meta.scraper.fetcher as fetcher_mod
from boxd_meta.scraper.errors import FetchError, FetchErrorKind
from boxd_meta.scraper.fetcher import DocumentFetcher, FetcherConfig, build_proxies


URL = "https://letterboxd.com/film/the-godfather/"


@pytest.fixture
def sleep_mock(monkeypatch):
    mock = MagicMock()
    monkeypatch.setattr(fetcher_mod.time, "sleep", mock)
    return mock


@pytest.fixture
def get_mock(monkeypatch):
    mock = MagicMock()
    monkeypatch.setattr(fetcher_mod.requests, "get", mock)
    return mock


def _response(status_code=200, text="<html><head><title>X • Letterboxd</title></head></html>"):
    r = MagicMock()
    r.status_code = status_code
    r.text = text
    r.url = URL
    return r


class TestBuildProxies:
    def test_empty(self):
        assert build_proxies("") is None
        assert build_proxies(None) is None

    def test_url(self):
        assert build_proxies(" http://127.0.0.1:7890 ") == {
            "http": "http://127.0.0.1:7890",
            "https": "http://127.0.0.1:7890",
        }


class TestDocumentFetcher:
    def test_success_returns_parsed_document(self, get_mock, sleep_mock):
        get_mock.return_value = _response()
        doc = DocumentFetcher().fetch(URL)

        assert doc.url == URL
        assert doc.status_code == 200
        assert doc.soup.find("title").get_text() == "X • Letterboxd"

    def test_sends_user_agent_and_timeout(self, get_mock, sleep_mock):
        get_mock.return_value = _response()
        cfg = FetcherConfig(timeout_sec=7.5, user_agent="TestAgent/1.0", proxy_url="http://proxy:1")
        DocumentFetcher(cfg).fetch(URL)

        _, kwargs = get_mock.call_args
        assert kwargs["headers"]["User-Agent"] == "TestAgent/1.0"
        assert kwargs["timeout"] == 7.5
        assert kwargs["proxies"] == {"http": "http://proxy:1", "https": "http://proxy:1"}

    def test_politeness_delay_before_every_fetch(self, get_mock, sleep_mock):
        get_mock.side_effect = [_response(), _response(status_code=500), _response()]
        f = DocumentFetcher(FetcherConfig(delay_min_sec=0.25, delay_max_sec=0.75))

        f.fetch(URL)
        with pytest.raises(FetchError):
            f.fetch(URL)
        f.fetch(URL)

        assert sleep_mock.call_count == 3
        for call in sleep_mock.call_args_list:
            assert 0.25 <= call.args[0] <= 0.75

    def test_zero_delay_skips_sleep(self, get_mock, sleep_mock):
        get_mock.return_value = _response()
        DocumentFetcher(FetcherConfig(delay_min_sec=0, delay_max_sec=0)).fetch(URL)
        sleep_mock.assert_not_called()

    def test_non_200_raises_http_status(self, get_mock, sleep_mock):
        get_mock.return_value = _response(status_code=404)
        with pytest.raises(FetchError) as exc_info:
            DocumentFetcher().fetch(URL)
        assert exc_info.value.kind is FetchErrorKind.HTTP_STATUS
        assert exc_info.value.status_code == 404
        assert exc_info.value.url == URL

    def test_timeout_raises_timeout_kind(self, get_mock, sleep_mock):
        get_mock.side_effect = Timeout("Operation timed out after 10000 milliseconds")
        with pytest.raises(FetchError) as exc_info:
            DocumentFetcher().fetch(URL)
        assert exc_info.value.kind is FetchErrorKind.TIMEOUT

    def test_network_error_raises_network_kind(self, get_mock, sleep_mock):
        get_mock.side_effect = CurlConnectionError("Could not resolve host")
        with pytest.raises(FetchError) as exc_info:
            DocumentFetcher().fetch(URL)
        assert exc_info.value.kind is FetchErrorKind.NETWORK

    def test_no_retries(self, get_mock, sleep_mock):
        get_mock.return_value = _response(status_code=503)
        with pytest.raises(FetchError):
            DocumentFetcher().fetch(URL)
        assert get_mock.call_count == 1
