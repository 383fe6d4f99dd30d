"""
Integration tests for the workout parse API.

Covers POST /workouts/parse, the catalogue lookups and /health.
"""

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from wod_parser_api.api.parse_routes import router
from wod_parser_api.catalogue import CatalogueNotLoadedError


def _parse(client, text, user_id="test-user-123", **extra):
    payload = {"rawText": text, "requestingUserId": user_id}
    payload.update(extra)
    return client.post("/workouts/parse", json=payload)


# ---------------------------------------------------------------------------
# POST /workouts/parse
# ---------------------------------------------------------------------------


class TestParseEndpoint:
    """Tests for the /workouts/parse endpoint."""

    def test_benchmark_response_fields(self, api_client, fran_text):
        """Response uses camelCase keys."""
        response = _parse(api_client, fran_text)
        assert response.status_code == 200

        data = response.json()
        assert data["success"] is True
        assert data["workoutFound"] is True
        assert data["confidence"] >= 90
        entity = data["workoutEntities"][0]
        assert entity["name"] == "Fran"
        assert entity["timeCapSeconds"] == 480
        assert entity["sourceTable"] == "girl_wods"
        assert entity["databaseId"] == 7
        assert entity["barbellLifts"] == ["Thruster"]
        assert "errors" not in data

    def test_empty_input(self, api_client):
        response = _parse(api_client, "")
        assert response.status_code == 200
        assert response.json() == {
            "success": False,
            "workoutFound": False,
            "workoutEntities": [],
            "confidence": 0,
            "errors": ["no input provided"],
        }

    def test_suggestion_response(self, api_client):
        response = _parse(api_client, "Fren\n21-15-9 reps for time of:\nThrusters\nPull-ups")
        assert response.status_code == 200
        data = response.json()
        assert data["workoutFound"] is False
        assert "Fran" in data["suggestedWorkouts"]

    def test_daily_log(self, api_client, daily_log_text):
        data = _parse(api_client, daily_log_text).json()
        assert data["extractedDate"] == "2025-06-27"
        assert [e["category"] for e in data["workoutEntities"]] == ["custom_user", "girls"]

    def test_community_id(self, api_client, user_id):
        data = _parse(
            api_client,
            "Summer Sweat\nAMRAP 20 minutes:\n10 Burpees",
            user_id,
            communityId=42,
        ).json()
        assert data["workoutEntities"][0]["category"] == "custom_community"

    def test_oversized_cap(self, api_client):
        """A runaway numeral is reported, not a server error."""
        response = _parse(api_client, "Long Grind\nFor time:\n50 burpees\nTime cap: " + "9" * 400)
        assert response.status_code == 200
        data = response.json()
        assert data["workoutFound"] is True
        assert data["errors"] == ["time cap not recognized in segment 1"]

    def test_missing_user_id(self, api_client):
        response = api_client.post("/workouts/parse", json={"rawText": "Fran"})
        assert response.status_code == 422

    def test_snake_case_body(self, api_client, user_id):
        response = api_client.post(
            "/workouts/parse",
            json={"raw_text": "Murph", "requesting_user_id": user_id},
        )
        assert response.status_code == 200
        assert response.json()["workoutEntities"][0]["name"] == "Murph"


# ---------------------------------------------------------------------------
# Catalogue lookups
# ---------------------------------------------------------------------------


class TestBenchmarkListing:
    def test_all(self, api_client):
        response = api_client.get("/workouts/benchmarks")
        assert response.status_code == 200
        data = response.json()
        assert len(data) == 32
        assert data[0]["sourceTable"] == "girl_wods"
        assert "workoutDescription" in data[0]

    def test_category(self, api_client):
        data = api_client.get("/workouts/benchmarks", params={"category": "heroes"}).json()
        assert len(data) == 11
        assert {row["category"] for row in data} == {"heroes"}

    def test_unknown_category(self, api_client):
        response = api_client.get("/workouts/benchmarks", params={"category": "bogus"})
        assert response.status_code == 400


class TestSuggestions:
    def test_partial_name(self, api_client):
        response = api_client.get("/workouts/suggestions", params={"q": "fr"})
        assert response.json() == {"query": "fr", "suggestions": ["Fran"]}

    def test_short_query(self, api_client):
        assert api_client.get("/workouts/suggestions", params={"q": "a"}).json()["suggestions"] == []

    def test_limit(self, api_client):
        data = api_client.get("/workouts/suggestions", params={"q": "an", "limit": 2}).json()
        assert data["suggestions"] == ["Angie", "Diane"]

    @pytest.mark.parametrize("limit", [0, 51])
    def test_limit_bounds(self, api_client, limit):
        response = api_client.get("/workouts/suggestions", params={"q": "an", "limit": limit})
        assert response.status_code == 422


# ---------------------------------------------------------------------------
# Health / startup
# ---------------------------------------------------------------------------


class TestHealth:
    def test_ready(self, client):
        response = client.get("/health")
        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "ok"
        assert data["catalogue"]["girls"] == 18

    def test_without_catalogue(self):
        """An app that never loaded the catalogue refuses to parse."""
        bare = FastAPI()
        bare.include_router(router)
        with TestClient(bare, raise_server_exceptions=True) as c:
            assert c.get("/health").status_code == 503
            with pytest.raises(CatalogueNotLoadedError):
                _parse(c, "Fran")
