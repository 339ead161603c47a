"""Management API provider tests."""

import httpx
import pytest
from supacheck.exceptions import ConfigurationError, ManagementAPIError
from supacheck.providers.management_provider import ManagementProvider


def _provider(handler):
    return ManagementProvider(
        api_key="mgmt-key",
        base_url="https://api.example.test/v1/",
        transport=httpx.MockTransport(handler),
    )


class TestManagementProvider:
    def test_requires_api_key(self):
        with pytest.raises(ConfigurationError):
            ManagementProvider(api_key="")

    def test_ignores_environment_key(self, monkeypatch):
        monkeypatch.setenv("SUPABASE_MANAGEMENT_API_KEY", "env-key")
        with pytest.raises(ConfigurationError):
            ManagementProvider(api_key="")

    def test_uses_given_api_key(self):
        provider = ManagementProvider(api_key="given-key")
        assert provider._get_headers()["Authorization"] == "Bearer given-key"

    @pytest.mark.asyncio
    async def test_list_projects_sends_bearer_token(self):
        seen = {}

        def handler(request):
            seen["url"] = str(request.url)
            seen["auth"] = request.headers["Authorization"]
            return httpx.Response(200, json=[{"id": "ref-a", "name": "alpha"}])

        projects = await _provider(handler).list_projects()

        assert projects == [{"id": "ref-a", "name": "alpha"}]
        assert seen["url"] == "https://api.example.test/v1/projects"
        assert seen["auth"] == "Bearer mgmt-key"

    @pytest.mark.asyncio
    async def test_get_backup_config(self):
        def handler(request):
            assert request.url.path == "/v1/projects/ref-a/database/backups"
            return httpx.Response(200, json={"pitr_enabled": True, "backups": []})

        config = await _provider(handler).get_backup_config("ref-a")

        assert config["pitr_enabled"] is True

    @pytest.mark.asyncio
    async def test_http_error_carries_status_and_message(self):
        def handler(request):
            return httpx.Response(403, text="Forbidden resource")

        with pytest.raises(ManagementAPIError) as exc_info:
            await _provider(handler).list_projects()

        assert exc_info.value.status_code == 403
        assert exc_info.value.message == "Forbidden resource"
        assert "HTTP 403" in str(exc_info.value)

    @pytest.mark.asyncio
    async def test_transport_error_has_no_status(self):
        def handler(request):
            raise httpx.ConnectError("connection refused", request=request)

        with pytest.raises(ManagementAPIError) as exc_info:
            await _provider(handler).get_backup_config("ref-a")

        assert exc_info.value.status_code is None

    @pytest.mark.asyncio
    async def test_server_error_is_not_retried(self):
        calls = []

        def handler(request):
            calls.append(request)
            return httpx.Response(503, text="unavailable")

        with pytest.raises(ManagementAPIError):
            await _provider(handler).list_projects()

        assert len(calls) == 1

    @pytest.mark.asyncio
    async def test_non_list_project_payload_rejected(self):
        def handler(request):
            return httpx.Response(200, json={"message": "unexpected"})

        with pytest.raises(ManagementAPIError):
            await _provider(handler).list_projects()
