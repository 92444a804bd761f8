import logging

from jsonapi_compound.config import Settings, get_settings
from jsonapi_compound.log import configure_logging
from jsonapi_compound.viewsets import JSONAPIViewSet


def test_defaults():
    settings = Settings()

    assert settings.allow_client_ids is False
    assert settings.resolve_nested_included is False
    assert settings.log_level == "INFO"


def test_environment_overrides(monkeypatch):
    monkeypatch.setenv("JSONAPI_ALLOW_CLIENT_IDS", "1")
    monkeypatch.setenv("JSONAPI_RESOLVE_NESTED_INCLUDED", "true")

    settings = get_settings()

    assert settings.allow_client_ids is True
    assert settings.resolve_nested_included is True
    assert get_settings() is settings


def test_viewset_attributes_win_over_settings(monkeypatch):
    monkeypatch.setenv("JSONAPI_ALLOW_CLIENT_IDS", "true")

    class Strict(JSONAPIViewSet):
        resource_type = "articles"
        allow_client_ids = False

    class Default(JSONAPIViewSet):
        resource_type = "articles"

    assert Strict().supports_client_ids() is False
    assert Default().supports_client_ids() is True
    assert Default().get_validator().client_ids is True


def test_configure_logging():
    configure_logging("debug")

    logger = logging.getLogger("jsonapi_compound")
    try:
        assert logger.level == logging.DEBUG
        assert logger.handlers
    finally:
        logger.handlers.clear()
        logger.setLevel(logging.NOTSET)
