"""Fixtures for endpoint tests.

The app is built without running its lifespan; each test wires the
services it needs onto ``app.state`` directly.
"""

from __future__ import annotations

from typing import TYPE_CHECKING
from unittest.mock import AsyncMock, MagicMock

import pytest
from fastapi.testclient import TestClient

from allergen_finder.core.config import get_settings
from allergen_finder.factory import create_app
from allergen_finder.services.screening.service import ScreeningService
from tests.factories.listings import make_listing
from tests.factories.services import StaticExtractor


if TYPE_CHECKING:
    from fastapi import FastAPI

    from allergen_finder.core.config import Settings


@pytest.fixture
def mock_candidates() -> MagicMock:
    """Candidate source returning one retailer and one brand listing."""
    candidates = MagicMock()
    candidates.configured = True
    candidates.resolve_location = AsyncMock(return_value=None)
    candidates.search = AsyncMock(
        return_value=[
            make_listing("Retailer Lotion", "https://www.target.com/p/1", rating=4.8),
            make_listing(
                "Brand Lotion",
                "https://www.acmeskin.com/lotion",
                rating=4.2,
                brand="Acme Skin",
            ),
        ]
    )
    return candidates


@pytest.fixture
def app(test_settings: Settings, mock_candidates: MagicMock) -> FastAPI:
    """Create the app with a screening service backed by fakes."""
    application = create_app(test_settings)
    application.dependency_overrides[get_settings] = lambda: test_settings
    application.state.screening_service = ScreeningService(
        mock_candidates,
        StaticExtractor(),
        None,
        test_settings.screening,
    )
    application.state.summary_service = None
    return application


@pytest.fixture
def client(app: FastAPI) -> TestClient:
    """Create a test client that reports server errors as responses."""
    return TestClient(app, raise_server_exceptions=False)
