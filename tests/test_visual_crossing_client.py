import unittest

import requests

from app.data_sources.visual_crossing_client import UNKNOWN_PROVIDER_ERROR, VisualCrossingClient
from app.errors import MalformedUpstreamData, UpstreamClientError, UpstreamHTTPError, UpstreamUnreachable

BASE_URL = "https://weather.example.test/timeline"


class DummyResp:
    def __init__(self, payload=None, status_code=200, text=""):
        self._payload = payload
        self.status_code = status_code
        self.text = text

    @property
    def ok(self):
        return self.status_code < 400

    def json(self):
        if self._payload is None:
            raise ValueError("No JSON object could be decoded")
        return self._payload


class FakeSession:
    def __init__(self, resp=None, exc=None):
        self.resp = resp
        self.exc = exc
        self.calls = []
        self.closed = False

    def get(self, url, params=None, timeout=None):
        self.calls.append({"url": url, "params": params, "timeout": timeout})
        if self.exc is not None:
            raise self.exc
        return self.resp

    def close(self):
        self.closed = True


def _client(session, api_key="secret-key"):
    return VisualCrossingClient(BASE_URL + "/", api_key, timeout_seconds=3.5, session=session)


class TestVisualCrossingClient(unittest.TestCase):
    def test_fetch_builds_request(self):
        payload = {"resolvedAddress": "San José", "days": [{}]}
        session = FakeSession(DummyResp(payload))

        result = _client(session).fetch("San José")

        self.assertEqual(result, payload)
        call = session.calls[0]
        self.assertEqual(call["url"], f"{BASE_URL}/San%20Jos%C3%A9")
        self.assertEqual(call["params"], {"key": "secret-key", "unitGroup": "metric"})
        self.assertEqual(call["timeout"], 3.5)

    def test_city_with_slash_is_encoded(self):
        session = FakeSession(DummyResp({"days": [{}]}))
        _client(session).fetch("a/b")
        self.assertEqual(session.calls[0]["url"], f"{BASE_URL}/a%2Fb")

    def test_http_error_uses_json_message(self):
        session = FakeSession(DummyResp({"message": "Invalid location"}, status_code=400))
        with self.assertRaises(UpstreamHTTPError) as ctx:
            _client(session).fetch("Atlantis")
        self.assertEqual(ctx.exception.status_code, 400)
        self.assertEqual(ctx.exception.provider_message, "Invalid location")
        self.assertEqual(ctx.exception.message, "API Error: 400 - Invalid location")

    def test_http_error_uses_text_body(self):
        session = FakeSession(DummyResp(None, status_code=401, text="No account found with API key"))
        with self.assertRaises(UpstreamHTTPError) as ctx:
            _client(session).fetch("Paris")
        self.assertEqual(ctx.exception.provider_message, "No account found with API key")

    def test_http_error_placeholder_when_body_empty(self):
        session = FakeSession(DummyResp(None, status_code=503, text=""))
        with self.assertRaises(UpstreamHTTPError) as ctx:
            _client(session).fetch("Paris")
        self.assertEqual(ctx.exception.provider_message, UNKNOWN_PROVIDER_ERROR)

    def test_unfollowed_redirect_is_http_error(self):
        session = FakeSession(DummyResp({"days": [{}]}, status_code=304))
        with self.assertRaises(UpstreamHTTPError) as ctx:
            _client(session).fetch("Paris")
        self.assertEqual(ctx.exception.status_code, 304)

    def test_timeout_is_unreachable(self):
        session = FakeSession(exc=requests.Timeout("read timed out"))
        with self.assertRaises(UpstreamUnreachable):
            _client(session).fetch("Paris")

    def test_connection_error_is_unreachable(self):
        session = FakeSession(exc=requests.ConnectionError("refused"))
        with self.assertRaises(UpstreamUnreachable):
            _client(session).fetch("Paris")

    def test_other_request_errors_are_client_errors(self):
        session = FakeSession(exc=requests.TooManyRedirects("loop"))
        with self.assertRaises(UpstreamClientError):
            _client(session).fetch("Paris")

    def test_missing_api_key_is_client_error(self):
        session = FakeSession(DummyResp({"days": [{}]}))
        with self.assertRaises(UpstreamClientError):
            _client(session, api_key=None).fetch("Paris")
        self.assertEqual(session.calls, [])

    def test_blank_city_is_client_error(self):
        with self.assertRaises(UpstreamClientError):
            _client(FakeSession()).fetch("   ")

    def test_non_json_success_body_is_malformed(self):
        session = FakeSession(DummyResp(None, status_code=200, text="<html>"))
        with self.assertRaises(MalformedUpstreamData):
            _client(session).fetch("Paris")

    def test_api_key_not_in_error_messages(self):
        session = FakeSession(exc=requests.ConnectionError("refused"))
        with self.assertRaises(UpstreamUnreachable) as ctx:
            _client(session).fetch("Paris")
        self.assertNotIn("secret-key", ctx.exception.message)

    def test_close_closes_session(self):
        session = FakeSession()
        _client(session).close()
        self.assertTrue(session.closed)


if __name__ == "__main__":
    unittest.main()
