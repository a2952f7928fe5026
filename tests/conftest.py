"""Shared test fixtures for all tests."""

import pytest


@pytest.fixture
def sample_city_id() -> str:
    """Sample OpenWeatherMap city ID (Prague) for testing."""
    return "3067696"


@pytest.fixture
def sample_api_key() -> str:
    """Sample OpenWeatherMap API key for testing."""
    return "test-api-key"


@pytest.fixture
def gateway_url() -> str:
    """Sample gateway publish endpoint for testing."""
    return "https://gateway.test/api/readings"
