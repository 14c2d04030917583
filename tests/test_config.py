from pathlib import Path

from openapi_tryout.config import DEFAULT_FALLBACK_URL, SynthConfig


class TestSynthConfig:
    def test_defaults(self):
        config = SynthConfig()
        assert config.fallback_url == DEFAULT_FALLBACK_URL
        assert config.timeout == 30.0
        assert [(h.key, h.value, h.enabled) for h in config.default_headers] == [
            ("Content-Type", "application/json", True),
            ("Accept", "application/json", True),
        ]

    def test_instances_do_not_share_headers(self):
        a, b = SynthConfig(), SynthConfig()
        a.default_headers[0].value = "text/plain"
        assert b.default_headers[0].value == "application/json"

    def test_from_env(self, monkeypatch, tmp_path):
        monkeypatch.setenv("TRYOUT_FALLBACK_URL", "http://fallback.test")
        monkeypatch.setenv("TRYOUT_TIMEOUT", "5")
        monkeypatch.setenv("TRYOUT_STORE_DIR", str(tmp_path))
        config = SynthConfig.from_env()
        assert config.fallback_url == "http://fallback.test"
        assert config.timeout == 5.0
        assert config.store_dir == Path(tmp_path)

    def test_from_env_defaults(self, monkeypatch):
        monkeypatch.delenv("TRYOUT_FALLBACK_URL", raising=False)
        monkeypatch.delenv("TRYOUT_TIMEOUT", raising=False)
        assert SynthConfig.from_env().fallback_url == DEFAULT_FALLBACK_URL
