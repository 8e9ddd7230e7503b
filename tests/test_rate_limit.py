import pytest

from movie_paradise.config import TestingConfig


class RateLimitedConfig(TestingConfig):
    RATELIMIT_ENABLED = True
    REVIEW_RATE_LIMIT = "3 per minute"


@pytest.fixture
def app_config():
    return RateLimitedConfig


def test_review_submission_is_rate_limited(client, backend, movie):
    url = f"/movie/{movie['movie_id']}/reviews"

    statuses = [
        client.post(url, data={'username': f'Visitor {i}', 'rating': '7'}).status_code
        for i in range(5)
    ]

    assert statuses == [302, 302, 302, 429, 429]
    pending = backend.get_reviews_by_movie_id(movie['movie_id'], only_approved=False)
    assert len(pending) == 3


def test_rate_limit_leaves_pages_alone(client, movie):
    for _ in range(5):
        assert client.get(f"/movie/{movie['movie_id']}").status_code == 200
