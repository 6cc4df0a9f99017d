"""Tests for md2slides.remote.client — Slides/Drive HTTP calls (mocked)."""

import pytest
import requests
from unittest.mock import patch, MagicMock

from md2slides import config
from md2slides.core.requests import CreateSlideRequest
from md2slides.errors import SlidesApiError
from md2slides.remote.client import SlidesClient


def _response(ok=True, payload=None, status_code=200, reason="OK", text=""):
    resp = MagicMock()
    resp.ok = ok
    resp.status_code = status_code
    resp.reason = reason
    resp.text = text
    resp.json.return_value = payload if payload is not None else {}
    return resp


@pytest.fixture
def client():
    return SlidesClient("token-123", timeout=5)


class TestSlidesClient:
    def test_requires_token(self):
        with pytest.raises(ValueError):
            SlidesClient("")

    def test_default_timeout(self):
        assert SlidesClient("t").timeout == config.REQUEST_TIMEOUT

    @patch("md2slides.remote.client.requests.post")
    def test_create_presentation(self, mock_post, client):
        mock_post.return_value = _response(payload={"presentationId": "p1", "slides": []})
        deck = client.create_presentation("My deck")
        assert deck["presentationId"] == "p1"

        args, kwargs = mock_post.call_args
        assert args[0] == f"{config.SLIDES_API_BASE}/presentations"
        assert kwargs["json"] == {"title": "My deck"}
        assert kwargs["headers"]["Authorization"] == "Bearer token-123"
        assert kwargs["timeout"] == 5

    @patch("md2slides.remote.client.requests.get")
    def test_get_presentation(self, mock_get, client):
        mock_get.return_value = _response(payload={"presentationId": "p1"})
        assert client.get_presentation("p1") == {"presentationId": "p1"}
        assert mock_get.call_args[0][0].endswith("/presentations/p1")

    @patch("md2slides.remote.client.requests.post")
    def test_copy_presentation(self, mock_post, client):
        mock_post.return_value = _response(payload={"id": "copy-1"})
        assert client.copy_presentation("tmpl", "Copy") == "copy-1"
        args, kwargs = mock_post.call_args
        assert args[0] == f"{config.DRIVE_API_BASE}/files/tmpl/copy"
        assert kwargs["json"] == {"name": "Copy"}

    @patch("md2slides.remote.client.requests.post")
    def test_copy_without_id(self, mock_post, client):
        mock_post.return_value = _response(payload={})
        with pytest.raises(SlidesApiError):
            client.copy_presentation("tmpl", "Copy")

    @patch("md2slides.remote.client.requests.post")
    def test_batch_update(self, mock_post, client):
        mock_post.return_value = _response(payload={"replies": [{}]})
        result = client.batch_update("p1", [CreateSlideRequest(object_id="s1", layout_id="L1")])
        assert result == {"replies": [{}]}
        args, kwargs = mock_post.call_args
        assert args[0].endswith("/presentations/p1:batchUpdate")
        assert kwargs["json"] == {"requests": [{
            "createSlide": {"objectId": "s1", "slideLayoutReference": {"layoutId": "L1"}},
        }]}

    @patch("md2slides.remote.client.requests.post")
    def test_empty_batch_not_sent(self, mock_post, client):
        assert client.batch_update("p1", []) is None
        mock_post.assert_not_called()

    @patch("md2slides.remote.client.requests.post")
    def test_error_response(self, mock_post, client):
        mock_post.return_value = _response(
            ok=False, status_code=403, reason="Forbidden", text='{"error": "denied"}',
        )
        with pytest.raises(SlidesApiError) as exc:
            client.batch_update("p1", [CreateSlideRequest(object_id="s1", layout_id="L1")])
        assert exc.value.status_code == 403
        assert "Failed to update presentation: Forbidden" in str(exc.value)
        assert "denied" in str(exc.value)

    @patch("md2slides.remote.client.requests.get")
    def test_get_error(self, mock_get, client):
        mock_get.return_value = _response(ok=False, status_code=404, reason="Not Found")
        with pytest.raises(SlidesApiError, match="Failed to get presentation: Not Found"):
            client.get_presentation("missing")

    @patch("md2slides.remote.client.requests.post")
    def test_connection_error(self, mock_post, client):
        mock_post.side_effect = requests.ConnectionError("offline")
        with pytest.raises(SlidesApiError, match="Failed to create presentation: offline") as exc:
            client.create_presentation("Deck")
        assert isinstance(exc.value.__cause__, requests.ConnectionError)

    @patch("md2slides.remote.client.requests.get")
    def test_timeout(self, mock_get, client):
        mock_get.side_effect = requests.Timeout("slow")
        with pytest.raises(SlidesApiError, match="Failed to get presentation: slow"):
            client.get_presentation("p1")

    @patch("md2slides.remote.client.requests.get")
    def test_body_not_json(self, mock_get, client):
        resp = _response()
        resp.json.side_effect = ValueError("Expecting value")
        mock_get.return_value = resp
        with pytest.raises(SlidesApiError, match="response is not JSON"):
            client.get_presentation("p1")
