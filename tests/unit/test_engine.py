"""Tests for the engine container."""

from learnhub.config import Settings
from learnhub.engine import build_engine


def _settings(**overrides: object) -> Settings:
    values = {
        "COLLECTIONS_API_URL": "http://collections.test/",
        "COLLECTIONS_API_TIMEOUT": 5.0,
        "DEFAULT_COLLECTION_SCOPE": "dashboard",
    }
    values.update(overrides)
    return Settings(**values)


class TestBuildEngine:
    def test_gateway_configured_from_settings(self) -> None:
        engine = build_engine("token-1", 1, _settings())

        gateway = engine.gateway()

        assert gateway.base_url == "http://collections.test"
        assert gateway.token == "token-1"

    def test_views_share_engine_state(self) -> None:
        engine = build_engine("token-1", 1, _settings())

        first = engine.view()
        second = engine.view()
        coordinator = engine.coordinator()

        assert first is not second
        assert first.store is second.store is coordinator.store
        assert first.versions is coordinator.versions
        assert engine.channel().subscriber_count == 2
        assert first.scope == "dashboard"

    def test_signed_out_session(self) -> None:
        engine = build_engine("", None, _settings())

        assert engine.session().current_user_id() is None
