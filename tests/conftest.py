import pytest

from agentscan.agent import Classifier, default_registry
from tests.fakes import FakeCrawlerMatcher


@pytest.fixture
def registry():
    return default_registry()


@pytest.fixture
def classifier(registry):
    return Classifier(registry, crawler_matcher=FakeCrawlerMatcher())
