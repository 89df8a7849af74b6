from unittest.mock import MagicMock

import pytest
from requests.exceptions import ConnectionError, HTTPError

from road_import.providers.http import HTTPClient


def _response(payload=None, error=None):
    r = MagicMock()
    r.json.return_value = payload
    r.raise_for_status.side_effect = error
    return r


def test_retries_connection_errors_then_succeeds():
    c = HTTPClient(user_agent="test", tries=3, backoff_s=0.0)
    c.s = MagicMock()
    c.s.post.side_effect = [ConnectionError("reset"), _response({"elements": []})]
    assert c.post_form_json("https://x", data={"data": "q"}) == {"elements": []}
    assert c.s.post.call_count == 2


def test_gives_up_after_last_try():
    c = HTTPClient(user_agent="test", tries=2, backoff_s=0.0)
    c.s = MagicMock()
    c.s.post.side_effect = ConnectionError("reset")
    with pytest.raises(ConnectionError):
        c.post_form_json("https://x", data={})
    assert c.s.post.call_count == 2


def test_http_status_errors_are_not_retried():
    c = HTTPClient(user_agent="test", tries=3, backoff_s=0.0)
    c.s = MagicMock()
    c.s.post.return_value = _response(error=HTTPError("429"))
    with pytest.raises(HTTPError):
        c.post_form_json("https://x", data={})
    assert c.s.post.call_count == 1
