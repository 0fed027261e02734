import json
from datetime import timedelta
from unittest.mock import patch

import pytest
import requests

from mercury_qa.api.auth_client import LOGIN_ENDPOINT, AuthClient
from mercury_qa.api.client import ApiClient, json_path, pretty_body
from mercury_qa.api.models import LoginRequest
from mercury_qa.data import TestResult


def make_response(status_code=200, body=None, text=None, elapsed_ms=120):
    response = requests.Response()
    response.status_code = status_code
    if body is not None:
        response._content = json.dumps(body).encode("utf-8")
        response.headers["Content-Type"] = "application/json"
    else:
        response._content = (text or "").encode("utf-8")
    response.encoding = "utf-8"
    response.elapsed = timedelta(milliseconds=elapsed_ms)
    return response


@pytest.fixture
def client():
    with ApiClient("https://api.example.com/") as api_client:
        yield api_client


def sent(mock_request):
    method, url = mock_request.call_args.args
    return method, url, mock_request.call_args.kwargs


class TestApiClient:
    def test_json_defaults(self, client) -> None:
        assert client.base_url == "https://api.example.com"
        assert client.session.headers["Content-Type"] == "application/json"
        assert client.session.headers["Accept"] == "application/json"

    def test_auth_token_and_reset(self, client) -> None:
        client.set_auth_token("abc")
        client.set_header("X-Trace", "1")
        assert client.session.headers["Authorization"] == "Bearer abc"
        client.reset_request_spec()
        assert "Authorization" not in client.session.headers
        assert "X-Trace" not in client.session.headers
        assert client.session.headers["Accept"] == "application/json"

    def test_get_with_params(self, client) -> None:
        with patch.object(client.session, "request", return_value=make_response(body={"ok": True})) as request:
            response = client.get("/claims", params={"page": 2})
        method, url, kwargs = sent(request)
        assert (method, url) == ("GET", "https://api.example.com/claims")
        assert kwargs["params"] == {"page": 2}
        assert kwargs["timeout"] == 30
        assert response.json() == {"ok": True}

    def test_dict_body_sent_as_json(self, client) -> None:
        with patch.object(client.session, "request", return_value=make_response(201, {"id": 1})) as request:
            client.post("claims", {"policy": "CHO075170006"})
        _, _, kwargs = sent(request)
        assert kwargs["json"] == {"policy": "CHO075170006"}
        assert "data" not in kwargs

    def test_model_body_omits_unset_fields(self, client) -> None:
        with patch.object(client.session, "request", return_value=make_response(400, {"message": "x"})) as request:
            client.post("login", LoginRequest(username="testuser"))
        _, _, kwargs = sent(request)
        assert json.loads(kwargs["data"]) == {"username": "testuser"}

    def test_raw_string_body(self, client) -> None:
        with patch.object(client.session, "request", return_value=make_response(text="ok")) as request:
            client.put("raw", '{"a": 1}')
        _, _, kwargs = sent(request)
        assert kwargs["data"] == b'{"a": 1}'

    def test_absolute_url_kept(self, client) -> None:
        with patch.object(client.session, "request", return_value=make_response(text="")) as request:
            client.delete("https://other.example.com/x")
        assert sent(request)[1] == "https://other.example.com/x"

    def test_exchange_attached_to_report(self, client) -> None:
        report = TestResult(test_id="t1", test_name="login")
        client.report = report
        with patch.object(client.session, "request", return_value=make_response(200, {"token": "abc"})):
            client.patch("users/1", {"email": "a@b.c"})
        names = [attachment.name for attachment in report.attachments]
        assert names == ["Request PATCH https://api.example.com/users/1", "Response 200"]
        request_doc = json.loads(report.attachments[0].content)
        assert request_doc["body"] == {"email": "a@b.c"}
        assert json.loads(report.attachments[1].content)["body"] == {"token": "abc"}


class TestResponseHelpers:
    def test_json_path(self) -> None:
        response = make_response(body={"user": {"username": "testuser"}})
        assert json_path(response, "user.username") == "testuser"
        assert json_path(response, "user.email") is None

    def test_json_path_on_non_json(self) -> None:
        assert json_path(make_response(text="<html>"), "token") is None

    def test_pretty_body(self) -> None:
        assert pretty_body(make_response(body={"a": 1})) == '{\n  "a": 1\n}'
        assert pretty_body(make_response(text="plain")) == "plain"


class TestAuthClient:
    def test_login_posts_to_endpoint(self, client) -> None:
        with patch.object(client.session, "request", return_value=make_response(200, {})) as request:
            AuthClient(client).login({"username": "u", "password": "p"})
        method, url, _ = sent(request)
        assert (method, url) == ("POST", f"https://api.example.com{LOGIN_ENDPOINT}")

    def test_login_and_authorize_sets_bearer(self, client) -> None:
        body = {"token": "jwt", "user": {"username": "testuser", "email": "t@example.com", "role": "adjuster"}}
        with patch.object(client.session, "request", return_value=make_response(200, body)):
            result = AuthClient(client).login_and_authorize(LoginRequest(username="testuser", password="Test@1234"))
        assert result.user.username == "testuser"
        assert client.session.headers["Authorization"] == "Bearer jwt"

    def test_login_and_authorize_raises_on_error(self, client) -> None:
        with patch.object(client.session, "request", return_value=make_response(401, {"message": "Invalid"})):
            with pytest.raises(requests.HTTPError):
                AuthClient(client).login_and_authorize({"username": "x", "password": "y"})
        assert "Authorization" not in client.session.headers

    def test_parse_error(self) -> None:
        assert AuthClient.parse_error(make_response(400, {"message": "Password is required"})).message == (
            "Password is required"
        )
