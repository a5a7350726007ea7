"""Unit tests for the search endpoint."""

from __future__ import annotations

from typing import TYPE_CHECKING
from unittest.mock import AsyncMock, MagicMock

import pytest
from fastapi import status

from allergen_finder.services.screening.constants import DISCLAIMER
from tests.factories.services import SEARCH_PATH, StaticExtractor


if TYPE_CHECKING:
    from fastapi import FastAPI
    from fastapi.testclient import TestClient


pytestmark = pytest.mark.unit


class TestSearchEndpoint:
    """Tests for POST /search."""

    def test_returns_screened_shortlist(self, client: TestClient) -> None:
        """Should return camelCase results with the disclaimer."""
        response = client.post(
            SEARCH_PATH,
            json={
                "allergens": ["Oxybenzone"],
                "categories": ["lotion"],
                "purchaseSites": ["acmeskin.com"],
            },
        )

        assert response.status_code == status.HTTP_200_OK
        data = response.json()
        assert data["ok"] is True
        assert data["complete"] is True
        assert data["message"].endswith(DISCLAIMER)
        assert "benzophenone-3" in data["allergens"]

        category = data["results"][0]
        assert category["category"] == "lotion"
        assert category["status"] == "ok"
        first = category["items"][0]
        assert first["name"] == "Brand Lotion"
        assert first["priority"] == 1
        assert first["safetyVerdict"] == "safe"
        assert first["ingredientsChecked"] is True
        assert first["links"] == {
            "primary": "https://www.acmeskin.com/lotion",
            "manufacturer": "https://www.acmeskin.com/lotion",
        }
        assert data["summary"] is None

    def test_accepts_snake_case(self, client: TestClient) -> None:
        """Should accept snake_case field names too."""
        response = client.post(
            SEARCH_PATH,
            json={
                "allergens": ["Oxybenzone"],
                "categories": ["lotion"],
                "rating_floor": 4.5,
            },
        )

        assert response.status_code == status.HTTP_200_OK
        names = [item["name"] for item in response.json()["results"][0]["items"]]
        assert names == ["Retailer Lotion"]

    def test_excluded_listings_are_reported(
        self,
        app: FastAPI,
        client: TestClient,
    ) -> None:
        """Should list excluded candidates with their verdict."""
        app.state.screening_service._extractor = StaticExtractor(
            "aqua, oxybenzone, glycerin"
        )

        response = client.post(
            SEARCH_PATH,
            json={"allergens": ["Oxybenzone"], "categories": ["lotion"]},
        )

        category = response.json()["results"][0]
        assert category["items"] == []
        assert {e["verdict"] for e in category["excluded"]} == {
            "unsafe-allergen-found"
        }
        assert category["excluded"][0]["matchedTerm"] == "oxybenzone"

    def test_empty_allergens_is_malformed(self, client: TestClient) -> None:
        """Should reject a request without allergens."""
        response = client.post(
            SEARCH_PATH,
            json={"allergens": ["  "], "categories": ["lotion"]},
        )

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        data = response.json()
        assert data["ok"] is False
        assert data["error"] == "MALFORMED_INPUT"
        assert data["requestId"]

    def test_invalid_rating_floor_is_malformed(self, client: TestClient) -> None:
        """Should reject a rating floor outside 0..5."""
        response = client.post(
            SEARCH_PATH,
            json={"allergens": ["x"], "categories": ["y"], "ratingFloor": 7},
        )

        assert response.status_code == status.HTTP_422_UNPROCESSABLE_ENTITY
        assert response.json()["error"] == "MALFORMED_INPUT"

    def test_missing_credential(
        self,
        client: TestClient,
        mock_candidates: MagicMock,
    ) -> None:
        """Should answer 503 when the search credential is missing."""
        mock_candidates.configured = False

        response = client.post(
            SEARCH_PATH,
            json={"allergens": ["Oxybenzone"], "categories": ["lotion"]},
        )

        assert response.status_code == status.HTTP_503_SERVICE_UNAVAILABLE
        assert response.json()["error"] == "CONFIGURATION_ERROR"

    def test_service_not_initialized(self, app: FastAPI, client: TestClient) -> None:
        """Should answer 503 when startup did not build the service."""
        app.state.screening_service = None

        response = client.post(
            SEARCH_PATH,
            json={"allergens": ["Oxybenzone"], "categories": ["lotion"]},
        )

        assert response.status_code == status.HTTP_503_SERVICE_UNAVAILABLE
        assert response.json()["error"] == "SERVICE_UNAVAILABLE"

    def test_unexpected_error(
        self,
        client: TestClient,
        mock_candidates: MagicMock,
    ) -> None:
        """Should map unexpected failures to a JSON SEARCH_FAILED error."""
        mock_candidates.search.side_effect = RuntimeError("boom")

        response = client.post(
            SEARCH_PATH,
            json={"allergens": ["Oxybenzone"], "categories": ["lotion"]},
        )

        assert response.status_code == status.HTTP_500_INTERNAL_SERVER_ERROR
        assert response.json()["error"] == "SEARCH_FAILED"
        assert response.json()["detail"] == "boom"


class TestSearchSummary:
    """Tests for the optional summary."""

    def test_summary_included_when_requested(
        self,
        app: FastAPI,
        client: TestClient,
    ) -> None:
        """Should attach the summary when asked for and available."""
        summarizer = MagicMock()
        summarizer.summarize = AsyncMock(return_value="[Lotion]\n- Product: ...")
        app.state.summary_service = summarizer

        response = client.post(
            SEARCH_PATH,
            json={
                "allergens": ["Oxybenzone"],
                "categories": ["lotion"],
                "summarize": True,
            },
        )

        assert response.json()["summary"] == "[Lotion]\n- Product: ..."
        summarizer.summarize.assert_awaited_once()

    def test_summary_skipped_when_not_requested(
        self,
        app: FastAPI,
        client: TestClient,
    ) -> None:
        """Should not call the model unless asked to."""
        summarizer = MagicMock()
        summarizer.summarize = AsyncMock(return_value="unused")
        app.state.summary_service = summarizer

        response = client.post(
            SEARCH_PATH,
            json={"allergens": ["Oxybenzone"], "categories": ["lotion"]},
        )

        assert response.json()["summary"] is None
        summarizer.summarize.assert_not_awaited()

    def test_summary_unavailable(self, client: TestClient) -> None:
        """Should still answer with results when summaries are disabled."""
        response = client.post(
            SEARCH_PATH,
            json={
                "allergens": ["Oxybenzone"],
                "categories": ["lotion"],
                "summarize": True,
            },
        )

        assert response.status_code == status.HTTP_200_OK
        assert response.json()["summary"] is None
