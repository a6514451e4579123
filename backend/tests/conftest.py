"""
Shared pytest fixtures and configuration for the watermark backend test suite.

This module provides:
- Hypothesis configuration for property-based testing
- Shared fixtures for file storage and the watermark client
- Directory-based test markers
"""

from datetime import timedelta

import pytest

# Hypothesis configuration
from hypothesis import HealthCheck, Phase, settings

from tests.fixtures.mock_repositories import MockFileRepository, MockStorageRepository
from watermark_backend.config.watermark_config import WatermarkApiConfig
from watermark_backend.domain.file_storage import FileManager

# Register Hypothesis profiles
settings.register_profile(
    "default",
    max_examples=100,
    deadline=None,
    suppress_health_check=[HealthCheck.too_slow, HealthCheck.function_scoped_fixture],
    phases=[Phase.explicit, Phase.reuse, Phase.generate, Phase.target, Phase.shrink],
)
settings.register_profile(
    "ci",
    max_examples=200,
    deadline=None,
    suppress_health_check=[HealthCheck.too_slow, HealthCheck.function_scoped_fixture],
)
settings.register_profile(
    "dev",
    max_examples=10,
    deadline=None,
    suppress_health_check=[HealthCheck.too_slow, HealthCheck.function_scoped_fixture],
)
settings.load_profile("default")


# =============================================================================
# File Storage Fixtures
# =============================================================================

@pytest.fixture
def file_repository() -> MockFileRepository:
    return MockFileRepository()


@pytest.fixture
def storage_repository() -> MockStorageRepository:
    return MockStorageRepository()


@pytest.fixture
def file_manager(file_repository, storage_repository) -> FileManager:
    """FileManager over in-memory repositories with a 24h retention."""
    return FileManager(file_repository, storage_repository, retention=timedelta(hours=24))


# =============================================================================
# Watermark Fixtures
# =============================================================================

@pytest.fixture
def watermark_config() -> WatermarkApiConfig:
    """Provide a configured watermark client setup pointing at a fake host."""
    return WatermarkApiConfig(
        base_url="https://watermark.test",
        access_key="test-access-key",
        secret_key="test-secret",
    )


@pytest.fixture
def no_sleep():
    """Sleep replacement that records requested delays."""
    delays = []

    def sleep(seconds):
        delays.append(seconds)

    sleep.delays = delays
    return sleep


# =============================================================================
# Pytest Configuration Hooks
# =============================================================================

def pytest_configure(config):
    """Configure pytest with custom markers."""
    config.addinivalue_line(
        "markers", "unit: Unit tests (fast, no external dependencies)"
    )
    config.addinivalue_line(
        "markers", "integration: Integration tests (filesystem or Redis)"
    )
    config.addinivalue_line(
        "markers", "property: Property-based tests using Hypothesis"
    )


def pytest_collection_modifyitems(config, items):
    """
    Automatically mark tests based on their location.

    - tests/unit/* -> @pytest.mark.unit
    - tests/integration/* -> @pytest.mark.integration
    - tests/property/* -> @pytest.mark.property
    """
    for item in items:
        test_path = str(item.fspath)

        if "/unit/" in test_path or "\\unit\\" in test_path:
            item.add_marker(pytest.mark.unit)
        elif "/integration/" in test_path or "\\integration\\" in test_path:
            item.add_marker(pytest.mark.integration)
        elif "/property/" in test_path or "\\property\\" in test_path:
            item.add_marker(pytest.mark.property)
