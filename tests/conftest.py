import pytest

from main import create_app
from reelysave.models import MediaCandidate
from reelysave.resolver import MediaResolver, Strategy


class CountingStrategy:
    """Fake strategy that records every shortcode it is asked about."""

    def __init__(self, result=None, error=None):
        self.result = result
        self.error = error
        self.calls = []

    def __call__(self, shortcode):
        self.calls.append(shortcode)
        if self.error is not None:
            raise self.error
        return self.result


@pytest.fixture
def video_candidate():
    return MediaCandidate(video_url='https://cdn/x.mp4', display_url='https://cdn/x.jpg', is_video=True)


@pytest.fixture
def image_candidate():
    return MediaCandidate(display_url='https://cdn/x.jpg', is_video=False)


@pytest.fixture
def make_client():
    """Flask test client backed by the given fake strategies"""
    def _make(*fetchers):
        strategies = [Strategy(f'fake{i}', fetch) for i, fetch in enumerate(fetchers, 1)]
        app = create_app({'TESTING': True}, resolver=MediaResolver(strategies))
        return app.test_client()
    return _make


@pytest.fixture
def counting_strategy():
    """Factory for fake strategies: ``counting_strategy(result=...)`` or ``counting_strategy(error=...)``"""
    return CountingStrategy
