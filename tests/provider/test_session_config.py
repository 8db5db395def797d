"""SessionConfig 加载测试"""

from voicedesk.provider.auth import StaticTokenProvider
from voicedesk.provider.config import SessionConfig, load_session_config

_ENV_VARS = [
    "VOICEDESK_API_BASE_URL",
    "VOICEDESK_API_TOKEN",
    "VOICEDESK_HTTP_TIMEOUT_S",
    "VOICEDESK_RECOGNITION_LANG",
]


class TestLoadSessionConfig:
    """load_session_config() 测试"""

    def test_defaults(self, monkeypatch):
        for var in _ENV_VARS:
            monkeypatch.delenv(var, raising=False)
        config = load_session_config()
        assert config == SessionConfig()
        assert config.api_base_url == "http://localhost:5001"
        assert config.api_token.get_secret_value() == ""
        assert config.timeout_s == 30
        assert config.recognition_language == "en-US"

    def test_env_overrides(self, monkeypatch):
        monkeypatch.setenv("VOICEDESK_API_BASE_URL", "https://api.example.com")
        monkeypatch.setenv("VOICEDESK_API_TOKEN", "secret-token")
        monkeypatch.setenv("VOICEDESK_HTTP_TIMEOUT_S", "5")
        monkeypatch.setenv("VOICEDESK_RECOGNITION_LANG", "en-GB")
        config = load_session_config()
        assert config.api_base_url == "https://api.example.com"
        assert config.api_token.get_secret_value() == "secret-token"
        assert config.timeout_s == 5
        assert config.recognition_language == "en-GB"

    def test_token_not_leaked_in_repr(self, monkeypatch):
        monkeypatch.setenv("VOICEDESK_API_TOKEN", "secret-token")
        assert "secret-token" not in repr(load_session_config())

    def test_invalid_timeout_falls_back(self, monkeypatch):
        monkeypatch.setenv("VOICEDESK_HTTP_TIMEOUT_S", "soon")
        assert load_session_config().timeout_s == 30


class TestStaticTokenProvider:
    async def test_returns_token(self):
        assert await StaticTokenProvider("abc").get_token() == "abc"

    async def test_blank_token_is_none(self):
        assert await StaticTokenProvider("").get_token() is None
