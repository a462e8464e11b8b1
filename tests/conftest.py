import pytest

from springcurve.cache import SpringCache
from springcurve.models import SpringConfig


@pytest.fixture
def cache() -> SpringCache:
    return SpringCache()


@pytest.fixture
def default_config() -> SpringConfig:
    return SpringConfig()
