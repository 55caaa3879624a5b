"""
Test Configuration
==================

Pytest configuration with fixtures shared by unit and integration tests.
Provides test settings, temporary output directories and pipeline objects.
"""

import shutil
import tempfile
from pathlib import Path
from typing import Generator
from unittest.mock import patch

import pytest
from pydantic_settings import SettingsConfigDict

from flagrant.config.settings import Settings
from flagrant.core.dsl.parser import FlagParser
from flagrant.core.dsl.resolver import TagResolver
from flagrant.core.pipeline import FlagPipeline
from flagrant.core.rendering.renderer import Canvas, FlagRenderer


# Test settings override
class TestSettings(Settings):
    """Test-specific settings."""

    __test__ = False

    environment: str = "testing"
    log_level: str = "DEBUG"
    default_width: int = 400
    default_height: int = 300
    output_path: Path = Path("test_out.png")

    model_config = SettingsConfigDict(env_file=".env.test", env_prefix="FLAGRANT_TEST_")


@pytest.fixture(scope="session")
def test_settings() -> TestSettings:
    """Test settings fixture."""
    return TestSettings()


@pytest.fixture(scope="session", autouse=True)
def override_settings(test_settings: TestSettings):
    """Override application settings for testing."""
    with patch("flagrant.config.settings.settings", test_settings):
        yield test_settings


@pytest.fixture
def temp_dir() -> Generator[Path, None, None]:
    """Create temporary directory for output files."""
    temp_path = Path(tempfile.mkdtemp(prefix="flagrant_test_"))
    yield temp_path
    shutil.rmtree(temp_path, ignore_errors=True)


@pytest.fixture
def parser() -> FlagParser:
    """Flag parser instance."""
    return FlagParser()


@pytest.fixture
def resolver() -> TagResolver:
    """Fresh tag resolver."""
    return TagResolver()


@pytest.fixture
def renderer() -> FlagRenderer:
    """Flag renderer instance."""
    return FlagRenderer()


@pytest.fixture
def canvas() -> Canvas:
    """Default-sized blank canvas."""
    return Canvas(400, 300)


@pytest.fixture
def pipeline(test_settings: TestSettings) -> FlagPipeline:
    """Pipeline bound to the test settings."""
    return FlagPipeline(test_settings)
