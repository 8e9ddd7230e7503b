"""
Movie Paradise configuration settings
"""
import os

from dotenv import load_dotenv

load_dotenv()


class Config:
    """Centralized configuration, read from the environment (.env supported)"""

    # Flask settings
    SECRET_KEY = os.getenv("SECRET_KEY", "my_super_secret_fallback")
    LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")

    # AWS DynamoDB (hosted backend)
    AWS_REGION = os.getenv('AWS_REGION', 'us-east-1')
    AWS_ACCESS_KEY_ID = os.getenv('AWS_ACCESS_KEY_ID')
    AWS_SECRET_ACCESS_KEY = os.getenv('AWS_SECRET_ACCESS_KEY')
    DYNAMODB_ENDPOINT_URL = os.getenv('DYNAMODB_ENDPOINT_URL')
    TABLE_PREFIX = os.getenv('TABLE_PREFIX', 'MovieParadise')

    # Password hashing
    BCRYPT_ROUNDS = int(os.getenv('BCRYPT_ROUNDS', 12))

    # Rate limiting (flask-limiter)
    RATELIMIT_ENABLED = True
    RATELIMIT_STORAGE_URI = os.getenv('RATELIMIT_STORAGE_URI', "memory://")
    RATELIMIT_DEFAULT = "100 per minute"
    REVIEW_RATE_LIMIT = os.getenv('REVIEW_RATE_LIMIT', "10 per minute")

    # UI settings
    REVIEW_POLL_INTERVAL = int(os.getenv('REVIEW_POLL_INTERVAL', 5))  # seconds
    HOME_SECTION_LIMIT = 5
    MOVIE_GENRES = [
        "Action", "Adventure", "Animation", "Comedy", "Crime",
        "Documentary", "Drama", "Fantasy", "Horror", "Sci-Fi", "Thriller"
    ]


class TestingConfig(Config):
    TESTING = True
    SECRET_KEY = "testing"
    AWS_REGION = 'us-east-1'
    AWS_ACCESS_KEY_ID = 'testing'
    AWS_SECRET_ACCESS_KEY = 'testing'
    DYNAMODB_ENDPOINT_URL = None
    TABLE_PREFIX = 'MovieParadiseTest'
    BCRYPT_ROUNDS = 4
    RATELIMIT_ENABLED = False
