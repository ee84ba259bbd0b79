import json

import pytest
import requests

from booking_client.utils.api_client import BAD_FORMAT_MESSAGE, TIMEOUT_MESSAGE, ApiClient
from booking_client.utils.errors import ApiError
from booking_client.utils.storage import USER_TOKEN, LocalStorage


def make_response(status=200, body=None, content_type="application/json", reason="OK", text=None):
    resp = requests.Response()
    resp.status_code = status
    resp.reason = reason
    resp.headers["content-type"] = content_type
    raw = text if text is not None else json.dumps(body)
    resp._content = raw.encode("utf-8")
    resp.encoding = "utf-8"
    return resp


class FakeSession:
    def __init__(self, outcome):
        self.outcome = outcome
        self.requests = []

    def request(self, method, url, **kwargs):
        self.requests.append((method, url, kwargs))
        if isinstance(self.outcome, Exception):
            raise self.outcome
        return self.outcome


def make_client(outcome, storage=None):
    session = FakeSession(outcome)
    return ApiClient(base_url="https://api.test/api/", timeout=5, storage=storage, session=session), session


class TestRequests:
    def test_headers_and_url(self, tmp_path):
        storage = LocalStorage(str(tmp_path / "storage.json"))
        storage.set_item(USER_TOKEN, "tok123")
        client, session = make_client(make_response(body={"success": True}), storage)

        assert client.get("/showtimes/movie/m1", params={"a": 1}) == {"success": True}

        method, url, kwargs = session.requests[0]
        assert method == "GET"
        assert url == "https://api.test/api/showtimes/movie/m1"
        assert kwargs["params"] == {"a": 1}
        assert kwargs["timeout"] == 5
        headers = kwargs["headers"]
        assert headers["Accept-Language"] == "vi"
        assert headers["Content-Type"] == "application/json"
        assert headers["Authorization"] == "Bearer tok123"

    def test_no_token_no_authorization(self):
        client, session = make_client(make_response(body={}))
        client.post("/tickets", json={"x": 1})
        _, _, kwargs = session.requests[0]
        assert "Authorization" not in kwargs["headers"]
        assert kwargs["json"] == {"x": 1}


class TestErrors:
    def test_server_message_is_kept(self):
        client, _ = make_client(make_response(400, {"message": "Mã giảm giá đã hết hạn"}, reason="Bad Request"))
        with pytest.raises(ApiError) as exc_info:
            client.get("/discounts/verify/OLD")
        assert exc_info.value.message == "Mã giảm giá đã hết hạn"
        assert exc_info.value.status_code == 400

    def test_html_404(self):
        client, _ = make_client(
            make_response(404, content_type="text/html", reason="Not Found", text="<!DOCTYPE html><html></html>")
        )
        with pytest.raises(ApiError) as exc_info:
            client.get("/missing")
        assert exc_info.value.message == "API endpoint không tồn tại. Vui lòng kiểm tra URL."

    def test_html_500(self):
        client, _ = make_client(make_response(502, content_type="text/html", reason="Bad Gateway", text="<html>x</html>"))
        with pytest.raises(ApiError) as exc_info:
            client.get("/x")
        assert exc_info.value.message == "Lỗi server nội bộ. Vui lòng thử lại sau."

    def test_plain_error_falls_back_to_status_line(self):
        client, _ = make_client(make_response(503, content_type="text/plain", reason="Service Unavailable", text="down"))
        with pytest.raises(ApiError) as exc_info:
            client.get("/x")
        assert exc_info.value.message == "HTTP 503: Service Unavailable"

    def test_non_json_success_is_rejected(self):
        client, _ = make_client(make_response(200, content_type="text/html", text="<html></html>"))
        with pytest.raises(ApiError) as exc_info:
            client.get("/x")
        assert exc_info.value.message == BAD_FORMAT_MESSAGE

    def test_timeout(self):
        client, _ = make_client(requests.Timeout("slow"))
        with pytest.raises(ApiError) as exc_info:
            client.get("/x")
        assert exc_info.value.message == TIMEOUT_MESSAGE

    def test_connection_error_gets_generic_network_message(self):
        client, _ = make_client(requests.ConnectionError("refused"))
        with pytest.raises(ApiError) as exc_info:
            client.get("/x")
        assert "kết nối" in exc_info.value.message
        assert "refused" not in exc_info.value.message
