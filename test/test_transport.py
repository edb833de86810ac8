import pytest
import requests

from conftest import NOT_JSON, fail, ok
from page4u_mcp.config import Credential, load_settings
from page4u_mcp.errors import ApiError, ConfigurationError, NetworkError, ProtocolError
from page4u_mcp.services import page4u
from page4u_mcp.services.bundler import DeployFile
from page4u_mcp.services.page4u import MultipartPayload, Page4UClient, page_path


class TestSend:

    def test_get_sets_auth_and_client_headers(self, client, session):
        session.queue(ok([{"slug": "a"}], total=1))
        result = client.send("GET", "/pages", params={"status": "draft"})

        call = session.last
        assert call.method == "GET"
        assert call.url == "https://api.page4u.test/api/v1/pages"
        assert call.headers["Authorization"] == "Bearer test-token"
        assert call.headers["X-Page4U-Client"] == "mcp"
        assert call.params == {"status": "draft"}
        assert call.timeout == 5
        assert result.data == [{"slug": "a"}]
        assert result.total == 1

    def test_dict_payload_is_sent_as_json(self, client, session):
        session.queue(ok({"slug": "a", "updated": ["headline"]}))
        client.send("PUT", "/pages/a", {"headline": "Hi"})

        call = session.last
        assert call.json == {"headline": "Hi"}
        assert call.headers["Content-Type"] == "application/json"
        assert not hasattr(call, "files")

    def test_multipart_payload_leaves_content_type_to_requests(self, client, session):
        session.queue(ok({"slug": "a", "url": "https://page4u.ai/a"}))
        upload = DeployFile("index.html", b"<html/>", "text/html")
        client.send("POST", "/pages", MultipartPayload(upload, {"slug": "a"}))

        call = session.last
        assert call.files == {"file": ("index.html", b"<html/>", "text/html")}
        assert call.data == {"slug": "a"}
        assert "Content-Type" not in call.headers
        assert not hasattr(call, "json")

    def test_missing_token_fails_before_any_request(self, session):
        client = Page4UClient(Credential(token=""), session=session)
        with pytest.raises(ConfigurationError) as exc:
            client.send("GET", "/pages")
        assert "PAGE4U_API_KEY" in str(exc.value)
        assert "page4u.ai/dashboard/settings" in str(exc.value)
        assert session.calls == []

    def test_transport_failure_becomes_network_error(self, client, session):
        session.raise_on_next(requests.ConnectionError("connection refused"))
        with pytest.raises(NetworkError) as exc:
            client.send("GET", "/pages")
        assert "connection refused" in str(exc.value)

    def test_timeout_becomes_network_error(self, client, session):
        session.raise_on_next(requests.Timeout("read timed out"))
        with pytest.raises(NetworkError):
            client.send("GET", "/pages")

    def test_non_json_body_is_a_protocol_error(self, client, session):
        session.queue(NOT_JSON, status_code=502, text="<html>Bad Gateway</html>")
        with pytest.raises(ProtocolError) as exc:
            client.send("GET", "/pages")
        assert "502" in str(exc.value)

    def test_failure_envelope_becomes_api_error(self, client, session):
        session.queue(fail("NOT_FOUND", "Page not found"), status_code=404)
        with pytest.raises(ApiError) as exc:
            client.send("GET", "/pages/missing")
        assert exc.value.code == "NOT_FOUND"
        assert exc.value.message == "Page not found"
        assert exc.value.status_code == 404

    def test_one_request_per_call_without_retries(self, client, session):
        session.raise_on_next(requests.ConnectionError("down"))
        with pytest.raises(NetworkError):
            client.send("GET", "/pages")
        assert len(session.calls) == 1


def test_page_path_encodes_slug_as_single_segment():
    assert page_path("my-bakery") == "/pages/my-bakery"
    assert page_path("a/b c", "/leads") == "/pages/a%2Fb%20c/leads"


class TestSettings:

    def test_defaults(self):
        settings = load_settings({})
        assert settings.api_key == ""
        assert settings.api_url == "https://page4u.ai"
        assert settings.timeout_seconds == 30.0
        assert settings.log_level == "INFO"
        assert not settings.credential.is_configured

    def test_environment_overrides(self):
        settings = load_settings({
            "PAGE4U_API_KEY": " key-123 ",
            "PAGE4U_API_URL": "https://staging.page4u.ai///",
            "PAGE4U_TIMEOUT": "12.5",
            "PAGE4U_LOG_LEVEL": "debug",
        })
        assert settings.credential.token == "key-123"
        assert settings.credential.base_url == "https://staging.page4u.ai"
        assert settings.timeout_seconds == 12.5
        assert settings.log_level == "DEBUG"

    def test_non_positive_timeout_is_rejected(self):
        with pytest.raises(ValueError):
            load_settings({"PAGE4U_TIMEOUT": "0"})


def test_process_client_is_built_lazily_from_environment(monkeypatch):
    monkeypatch.setenv("PAGE4U_API_KEY", "env-key")
    monkeypatch.setenv("PAGE4U_API_URL", "https://env.page4u.test/")
    page4u.clear_client_cache()
    try:
        client = page4u.get_page4u_client()
        assert client.credential.token == "env-key"
        assert client.credential.base_url == "https://env.page4u.test"
        assert page4u.get_page4u_client() is client
    finally:
        page4u.clear_client_cache()
