"""Unit tests for client configuration, the builder and environment settings."""

import aiohttp
import pytest
from pydantic import ValidationError

from bgmtv import BangumiClient, ClientBuilder, ClientConfig, ConfigError, Settings
from bgmtv.config import DEFAULT_BASE_URL, get_settings

USER_AGENT = "tester/bgmtv-tests/0.1"


class TestClientBuilder:
    """Test building clients."""

    def test_build_with_defaults(self):
        """Test a user agent alone is enough to build."""
        client = BangumiClient.builder().user_agent(USER_AGENT).build()

        assert client.base_url == DEFAULT_BASE_URL == "https://api.bgm.tv"
        assert client.user_agent == USER_AGENT
        assert client.token is None
        assert client.timeout is None
        assert client.owns_session is True

    def test_build_with_all_options(self):
        client = (
            BangumiClient.builder()
            .base_url("https://bgm.example.com/")
            .user_agent(USER_AGENT)
            .auth_token("auth_token")
            .timeout(5)
            .build()
        )

        assert client.base_url == "https://bgm.example.com"
        assert client.token == "auth_token"
        assert client.timeout == 5
        assert client.headers["Authorization"] == "Bearer auth_token"

    def test_token_alias(self):
        client = ClientBuilder().user_agent(USER_AGENT).token("abc").build()
        assert client.token == "abc"

    def test_default_headers(self):
        client = BangumiClient.builder().user_agent(USER_AGENT).build()

        assert client.headers == {
            "User-Agent": USER_AGENT,
            "Accept": "application/json",
        }

    @pytest.mark.parametrize("user_agent", [None, "", "   "])
    def test_missing_user_agent_fails(self, user_agent):
        """Test build fails without an identifying user agent."""
        builder = BangumiClient.builder()
        if user_agent is not None:
            builder.user_agent(user_agent)

        with pytest.raises(ConfigError, match="user_agent is required"):
            builder.build()

    @pytest.mark.parametrize("base_url", ["api.bgm.tv", "ftp://api.bgm.tv", ""])
    def test_invalid_base_url_fails(self, base_url):
        builder = BangumiClient.builder().user_agent(USER_AGENT).base_url(base_url)

        with pytest.raises(ConfigError, match="base_url"):
            builder.build()

    @pytest.mark.parametrize("timeout", [0, -1])
    def test_invalid_timeout_fails(self, timeout):
        builder = BangumiClient.builder().user_agent(USER_AGENT).timeout(timeout)

        with pytest.raises(ConfigError, match="timeout"):
            builder.build()

    def test_blank_token_fails(self):
        builder = BangumiClient.builder().user_agent(USER_AGENT).auth_token("  ")

        with pytest.raises(ConfigError, match="token"):
            builder.build()

    def test_session_must_be_aiohttp(self):
        builder = BangumiClient.builder().user_agent(USER_AGENT).session(object())

        with pytest.raises(ConfigError, match="aiohttp.ClientSession"):
            builder.build()

    async def test_borrowed_session_is_not_closed(self):
        """Test a caller-provided session outlives the client."""
        async with aiohttp.ClientSession() as session:
            client = BangumiClient.builder().user_agent(USER_AGENT).session(session).build()

            assert client.owns_session is False
            await client.close()
            assert session.closed is False

    def test_builder_is_reusable(self):
        builder = BangumiClient.builder().user_agent(USER_AGENT)

        first = builder.build()
        second = builder.auth_token("later").build()

        assert first.token is None
        assert second.token == "later"


class TestClientImmutability:
    """Test a built client's configuration cannot change."""

    def test_config_is_frozen(self):
        client = BangumiClient.builder().user_agent(USER_AGENT).build()

        with pytest.raises(ValidationError):
            client.config.user_agent = "other"

    @pytest.mark.parametrize("attribute", ["base_url", "user_agent", "token", "timeout", "config"])
    def test_properties_are_read_only(self, attribute):
        client = BangumiClient.builder().user_agent(USER_AGENT).build()

        with pytest.raises(AttributeError):
            setattr(client, attribute, "changed")

    def test_headers_are_a_copy(self):
        client = BangumiClient.builder().user_agent(USER_AGENT).build()

        client.headers["User-Agent"] = "mutated"

        assert client.headers["User-Agent"] == USER_AGENT

    def test_repr_hides_token(self):
        client = (
            BangumiClient.builder().user_agent(USER_AGENT).auth_token("secret-token").build()
        )

        assert "secret-token" not in repr(client)
        assert "secret-token" not in repr(client.config)


class TestClientConfig:
    def test_strips_values(self):
        config = ClientConfig(base_url=" https://api.bgm.tv/ ", user_agent="  ua/1.0  ")

        assert config.base_url == "https://api.bgm.tv"
        assert config.user_agent == "ua/1.0"

    def test_user_agent_required(self):
        with pytest.raises(ValidationError):
            ClientConfig()


class TestSettings:
    """Test environment-driven settings."""

    def test_defaults(self, monkeypatch):
        for name in ("BGM_BASE_URL", "BGM_USER_AGENT", "BGM_TOKEN", "BGM_TIMEOUT_SECONDS"):
            monkeypatch.delenv(name, raising=False)

        settings = Settings(_env_file=None)

        assert settings.base_url == DEFAULT_BASE_URL
        assert settings.user_agent == ""
        assert settings.token is None
        assert settings.timeout_seconds is None
        assert settings.log_level == "INFO"

    def test_reads_environment(self, monkeypatch):
        monkeypatch.setenv("BGM_USER_AGENT", USER_AGENT)
        monkeypatch.setenv("BGM_TOKEN", "env-token")
        monkeypatch.setenv("BGM_TIMEOUT_SECONDS", "2.5")
        monkeypatch.setenv("BGM_LOG_LEVEL", "debug")

        settings = Settings(_env_file=None)

        assert settings.user_agent == USER_AGENT
        assert settings.token == "env-token"
        assert settings.timeout_seconds == 2.5
        assert settings.log_level == "DEBUG"

    def test_invalid_log_level(self, monkeypatch):
        monkeypatch.setenv("BGM_LOG_LEVEL", "LOUD")

        with pytest.raises(ValidationError, match="Invalid log level"):
            Settings(_env_file=None)

    def test_blank_token_is_unset(self, monkeypatch):
        monkeypatch.setenv("BGM_TOKEN", "  ")

        assert Settings(_env_file=None).token is None

    def test_builder_from_settings(self):
        settings = Settings(
            _env_file=None,
            base_url="https://bgm.example.com",
            user_agent=USER_AGENT,
            token="env-token",
            timeout_seconds=3,
        )

        client = ClientBuilder.from_settings(settings).build()

        assert client.base_url == "https://bgm.example.com"
        assert client.user_agent == USER_AGENT
        assert client.token == "env-token"
        assert client.timeout == 3

    def test_builder_from_settings_without_user_agent_fails(self, monkeypatch):
        monkeypatch.delenv("BGM_USER_AGENT", raising=False)
        settings = Settings(_env_file=None)

        with pytest.raises(ConfigError):
            ClientBuilder.from_settings(settings).build()

    def test_get_settings_is_cached(self):
        get_settings.cache_clear()
        assert get_settings() is get_settings()
        get_settings.cache_clear()
