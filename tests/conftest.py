import pytest
from moto import mock_aws

from movie_paradise import create_app
from movie_paradise.config import TestingConfig

ADMIN_EMAIL = 'admin@example.com'
USER_EMAIL = 'viewer@example.com'
PASSWORD = 'secret123'

MOVIE_DATA = {
    'title': 'Inception',
    'tagline': 'Your mind is the scene of the crime.',
    'overview': 'A thief who steals corporate secrets through dream-sharing technology.',
    'poster_url': 'https://example.com/inception.jpg',
    'background_url': 'https://example.com/inception-bg.jpg',
    'year': 2010,
    'rating': 8.8,
    'duration': '2h 28m',
    'genres': ['Sci-Fi', 'Action'],
}


@pytest.fixture
def app_config():
    return TestingConfig


@pytest.fixture
def app(monkeypatch, app_config):
    monkeypatch.setenv('AWS_ACCESS_KEY_ID', 'testing')
    monkeypatch.setenv('AWS_SECRET_ACCESS_KEY', 'testing')
    monkeypatch.setenv('AWS_DEFAULT_REGION', 'us-east-1')
    with mock_aws():
        app = create_app(app_config)
        app.extensions['backend'].create_tables()
        yield app


@pytest.fixture
def backend(app):
    return app.extensions['backend']


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def user(backend):
    backend.register_user(USER_EMAIL, PASSWORD)
    return backend.get_user(USER_EMAIL)


@pytest.fixture
def admin(backend):
    backend.register_user(ADMIN_EMAIL, PASSWORD)
    admin = backend.get_user(ADMIN_EMAIL)
    backend.add_admin(admin['user_id'])
    return admin


@pytest.fixture
def movie(backend, admin):
    return backend.admin_create_movie(admin['user_id'], MOVIE_DATA)


def login(client, email, password=PASSWORD):
    return client.post('/login', data={'email': email, 'password': password})


@pytest.fixture
def admin_client(client, admin):
    login(client, ADMIN_EMAIL)
    return client


@pytest.fixture
def user_client(client, user):
    login(client, USER_EMAIL)
    return client
