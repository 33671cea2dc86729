"""
End-to-end tests for the HTTP API.

Tests cover:
- POST /translate success with the shipped data
- Missing fields and malformed directions → 400
- Malformed bodies → 400
- Parse failure and missing vocabulary → 500 with fallback translatedCode
- GET /, /health, /directions
- Startup aborts when language data cannot be loaded
"""

import pytest
from unittest.mock import patch

from exceptions import ConfigLoadError
from utils.text_utils import preview


# =====================
# POST /translate
# =====================

class TestTranslateEndpoint:

    def test_translates_sample(self, test_client, sample_en, sample_ja):
        response = test_client.post(
            "/translate", json={"code": sample_en, "direction": "en-to-ja"}
        )

        assert response.status_code == 200
        assert response.json() == {"translatedCode": sample_ja}

    def test_reverse_direction(self, test_client, sample_en, sample_ja):
        response = test_client.post(
            "/translate", json={"code": sample_ja, "direction": "ja-to-en"}
        )

        assert response.status_code == 200
        assert response.json()["translatedCode"] == sample_en

    def test_direction_whitespace_trimmed(self, test_client):
        response = test_client.post(
            "/translate", json={"code": "next costume", "direction": " en-to-ja "}
        )

        assert response.status_code == 200

    def test_missing_direction(self, test_client):
        response = test_client.post("/translate", json={"code": "move (10) steps"})

        assert response.status_code == 400
        error = response.json()["error"]
        assert error["code"] == "MISSING_FIELD"
        assert error["details"]["missing"] == ["direction"]

    def test_empty_code(self, test_client):
        response = test_client.post("/translate", json={"code": "", "direction": "en-to-ja"})

        assert response.status_code == 400
        assert response.json()["error"]["code"] == "MISSING_FIELD"

    def test_invalid_direction(self, test_client):
        response = test_client.post(
            "/translate", json={"code": "move (10) steps", "direction": "english"}
        )

        assert response.status_code == 400
        error = response.json()["error"]
        assert error["code"] == "INVALID_DIRECTION"
        assert error["details"]["provided"] == "english"
        assert error["details"]["valid"] == ["en-to-ja", "ja-to-en"]

    def test_preview_length_from_settings(self, test_client):
        from config import get_settings, settings
        from main import app

        app.dependency_overrides[get_settings] = lambda: settings.model_copy(
            update={"log_preview_chars": 5}
        )
        try:
            with patch("routes.translate.preview", wraps=preview) as spy:
                response = test_client.post(
                    "/translate", json={"code": "next costume", "direction": "en-to-ja"}
                )
        finally:
            app.dependency_overrides.clear()

        assert response.status_code == 200
        spy.assert_called_once_with("next costume", 5)

    def test_body_not_an_object(self, test_client):
        response = test_client.post("/translate", json=["move (10) steps", "en-to-ja"])

        assert response.status_code == 400
        assert response.json()["error"]["code"] == "VALIDATION_ERROR"

    def test_parse_failure_returns_input(self, test_client):
        response = test_client.post(
            "/translate", json={"code": "move (10 steps", "direction": "en-to-ja"}
        )

        assert response.status_code == 500
        body = response.json()
        assert body["error"]["code"] == "PARSE_FAILED"
        assert body["translatedCode"] == "move (10 steps"

    def test_missing_vocabulary(self, test_client):
        response = test_client.post(
            "/translate", json={"code": "move (10) steps", "direction": "en-to-fr"}
        )

        assert response.status_code == 500
        body = response.json()
        assert body["error"]["code"] == "VOCABULARY_UNAVAILABLE"
        assert body["translatedCode"] == "move (10) steps"


# =====================
# OTHER ROUTES
# =====================

class TestServiceRoutes:

    def test_root_banner(self, test_client):
        response = test_client.get("/")

        assert response.status_code == 200
        assert response.text == "Block Translation API is running!"

    def test_health(self, test_client):
        response = test_client.get("/health")

        assert response.status_code == 200
        body = response.json()
        assert body["status"] == "healthy"
        assert "ja" in body["locales"]
        assert body["mapping_entries"] > 0

    def test_directions(self, test_client):
        response = test_client.get("/directions")

        assert response.status_code == 200
        body = response.json()
        assert body["directions"] == ["en-to-ja", "ja-to-en"]
        assert body["mapping_pair"] == "en-to-ja"


# =====================
# STARTUP
# =====================

class TestStartup:

    def test_startup_fails_without_language_data(self):
        from fastapi.testclient import TestClient
        from main import app

        failure = ConfigLoadError("dropdown mapping", "data/dropdown_map.json", "file not found")

        with patch("main.build_translation_service", side_effect=failure):
            with pytest.raises(ConfigLoadError):
                with TestClient(app):
                    pass
