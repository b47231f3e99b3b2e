import pytest
from dooray_mcp.config import (
    DEFAULT_BASE_URL,
    EnvClientProvider,
    create_client_from_env,
)
from dooray_mcp.errors import MissingApiTokenError


@pytest.fixture(autouse=True)
def no_dotenv(monkeypatch):
    # Prevent load_dotenv from repopulating values from .env
    monkeypatch.setattr("dooray_mcp.config.load_dotenv", lambda *a, **k: None)


def test_create_client_from_env_missing_token(monkeypatch):
    monkeypatch.delenv("DOORAY_API_TOKEN", raising=False)

    with pytest.raises(MissingApiTokenError) as exc:
        create_client_from_env()

    assert "DOORAY_API_TOKEN environment variable is required" in str(exc.value)


def test_create_client_from_env_default_base_url(monkeypatch):
    monkeypatch.setenv("DOORAY_API_TOKEN", "tok")
    monkeypatch.delenv("DOORAY_API_BASE_URL", raising=False)

    client = create_client_from_env()

    assert client.base_url == DEFAULT_BASE_URL
    assert client.api_token == "tok"


def test_create_client_from_env_custom_base_url(monkeypatch):
    monkeypatch.setenv("DOORAY_API_TOKEN", "tok")
    monkeypatch.setenv("DOORAY_API_BASE_URL", "https://api.dooray.co.kr/")

    client = create_client_from_env()

    assert client.base_url == "https://api.dooray.co.kr"


def test_env_client_provider_reads_token_per_call_until_built(monkeypatch):
    monkeypatch.delenv("DOORAY_API_TOKEN", raising=False)
    provider = EnvClientProvider()

    with pytest.raises(MissingApiTokenError):
        provider()

    monkeypatch.setenv("DOORAY_API_TOKEN", "late-tok")
    client = provider()

    assert client.api_token == "late-tok"
    assert provider() is client


@pytest.mark.asyncio
async def test_env_client_provider_aclose_resets(monkeypatch):
    monkeypatch.setenv("DOORAY_API_TOKEN", "tok")
    provider = EnvClientProvider()
    first = provider()

    await provider.aclose()
    second = provider()

    assert first.http.is_closed
    assert second is not first
    await provider.aclose()


@pytest.mark.asyncio
async def test_env_client_provider_aclose_without_client_is_noop():
    await EnvClientProvider().aclose()


@pytest.mark.asyncio
async def test_server_starts_without_token_and_fails_per_call(monkeypatch):
    from dooray_mcp.server import create_app

    monkeypatch.delenv("DOORAY_API_TOKEN", raising=False)
    app = create_app(EnvClientProvider())

    result = await app.call_tool("get-wiki-list", {})

    assert result.isError is True
    assert result.content[0].text == (
        "Error: DOORAY_API_TOKEN environment variable is required"
    )
