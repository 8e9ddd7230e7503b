"""
Hosted backend client.

Every table lives in AWS DynamoDB and is reached through ``boto3``. Besides
plain reads, this module carries the admin-gated procedures (``is_admin``,
``admin_create_movie``, ``admin_update_movie``, ``admin_delete_movie``) and
the row rules for reviews: anyone may insert a pending review, only an admin
may approve, reject or list unapproved ones.
"""
import functools
import logging
import uuid
from datetime import datetime, timezone
from decimal import Decimal

import boto3
from bcrypt import checkpw, gensalt, hashpw
from boto3.dynamodb.conditions import Attr
from botocore.exceptions import ClientError

from .validation import (
    MAX_REVIEW_RATING,
    MIN_REVIEW_RATING,
    is_valid_uuid,
    validate_credentials,
)

logger = logging.getLogger(__name__)

# logical name -> (table suffix, partition key)
TABLES = {
    'movies': ('Movies', 'movie_id'),
    'cast_members': ('CastMembers', 'cast_id'),
    'reviews': ('Reviews', 'review_id'),
    'admin_users': ('AdminUsers', 'user_id'),
    'users': ('Users', 'email'),
}

MOVIE_FIELDS = (
    'title', 'tagline', 'overview', 'poster_url', 'background_url',
    'trailer_url', 'download_url', 'year', 'rating', 'duration', 'genres',
)
MOVIE_REQUIRED_FIELDS = ('title', 'overview', 'poster_url', 'year', 'duration')


class BackendError(Exception):
    """A request to the hosted backend failed; ``str(e)`` is its message"""


class NotFoundError(BackendError):
    pass


class InvalidIdError(BackendError):
    pass


class PermissionDeniedError(BackendError):
    pass


def backend_call(func):
    """Translate DynamoDB client errors into BackendError"""
    @functools.wraps(func)
    def wrapper(*args, **kwargs):
        try:
            return func(*args, **kwargs)
        except ClientError as e:
            message = e.response.get('Error', {}).get('Message') or str(e)
            logger.error("❌ Error in %s: %s", func.__name__, message)
            raise BackendError(message) from e
    return wrapper


def _now():
    return datetime.now(timezone.utc).isoformat()


def _to_item(value):
    """Convert floats to Decimal, recursively, for DynamoDB"""
    if isinstance(value, float):
        return Decimal(str(value))
    if isinstance(value, dict):
        return {k: _to_item(v) for k, v in value.items()}
    if isinstance(value, list):
        return [_to_item(v) for v in value]
    return value


def _plain(value):
    """Convert DynamoDB Decimals back to int/float for templates and JSON"""
    if isinstance(value, Decimal):
        return int(value) if value % 1 == 0 else float(value)
    if isinstance(value, dict):
        return {k: _plain(v) for k, v in value.items()}
    if isinstance(value, (list, set)):
        return [_plain(v) for v in value]
    return value


def review_counts(reviews):
    approved = sum(1 for r in reviews if r.get('is_approved'))
    return {'pending': len(reviews) - approved, 'approved': approved}


class HostedBackend:
    """Thin client over the hosted DynamoDB tables"""

    def __init__(self, region_name='us-east-1', table_prefix='MovieParadise',
                 endpoint_url=None, aws_access_key_id=None,
                 aws_secret_access_key=None, bcrypt_rounds=12):
        kwargs = {
            'region_name': region_name,
            'aws_access_key_id': aws_access_key_id,
            'aws_secret_access_key': aws_secret_access_key,
        }
        if endpoint_url:
            kwargs['endpoint_url'] = endpoint_url
        self.dynamodb = boto3.resource('dynamodb', **kwargs)
        self.table_prefix = table_prefix
        self.bcrypt_rounds = bcrypt_rounds
        self.tables = {
            name: self.dynamodb.Table(self.table_name(name)) for name in TABLES
        }

    @classmethod
    def from_config(cls, config):
        return cls(
            region_name=config['AWS_REGION'],
            table_prefix=config['TABLE_PREFIX'],
            endpoint_url=config.get('DYNAMODB_ENDPOINT_URL'),
            aws_access_key_id=config.get('AWS_ACCESS_KEY_ID'),
            aws_secret_access_key=config.get('AWS_SECRET_ACCESS_KEY'),
            bcrypt_rounds=config.get('BCRYPT_ROUNDS', 12),
        )

    def table_name(self, name):
        return f"{self.table_prefix}_{TABLES[name][0]}"

    @backend_call
    def create_tables(self):
        """Create any missing table. Returns the names that were created."""
        existing = {table.name for table in self.dynamodb.tables.all()}
        created = []
        for name, (_, key) in TABLES.items():
            table_name = self.table_name(name)
            if table_name in existing:
                continue
            table = self.dynamodb.create_table(
                TableName=table_name,
                KeySchema=[{'AttributeName': key, 'KeyType': 'HASH'}],
                AttributeDefinitions=[{'AttributeName': key, 'AttributeType': 'S'}],
                BillingMode='PAY_PER_REQUEST',
            )
            table.wait_until_exists()
            created.append(table_name)
            logger.info("✅ Created table %s", table_name)
        return created

    def _scan(self, name, filter_expression=None):
        kwargs = {}
        if filter_expression is not None:
            kwargs['FilterExpression'] = filter_expression

        table = self.tables[name]
        response = table.scan(**kwargs)
        items = response.get('Items', [])

        # Handle pagination
        while 'LastEvaluatedKey' in response:
            response = table.scan(ExclusiveStartKey=response['LastEvaluatedKey'], **kwargs)
            items.extend(response.get('Items', []))

        return [_plain(item) for item in items]

    def _get(self, name, key_value):
        key = TABLES[name][1]
        item = self.tables[name].get_item(Key={key: key_value}).get('Item')
        return _plain(item) if item else None

    # ------------------------------------------------------------------
    # Users
    # ------------------------------------------------------------------
    def register_user(self, email, password, confirm_password=None):
        """Register new user. Returns ``(success, message)``."""
        email = (email or '').strip().lower()
        error = validate_credentials(email, password, confirm_password)
        if error:
            return False, error

        hashed_password = hashpw(password.encode('utf-8'), gensalt(self.bcrypt_rounds)).decode('utf-8')
        try:
            self.tables['users'].put_item(
                Item={
                    'email': email,
                    'user_id': str(uuid.uuid4()),
                    'password': hashed_password,
                    'created_at': _now(),
                    'is_active': True,
                },
                ConditionExpression=Attr('email').not_exists(),
            )
        except ClientError as e:
            if e.response['Error']['Code'] == 'ConditionalCheckFailedException':
                return False, "User already exists"
            logger.error("❌ Error registering user: %s", e)
            return False, "Registration failed. Please try again."

        logger.info("✅ New user registered: %s", email)
        return True, "Registration successful"

    def login_user(self, email, password):
        """Returns ``(True, user)`` or ``(False, message)``."""
        email = (email or '').strip().lower()
        if not email:
            return False, "Invalid email or password"
        try:
            user = self._get('users', email)
        except ClientError as e:
            logger.error("❌ Error during login: %s", e)
            return False, "Login failed. Please try again."

        if not user or not checkpw((password or '').encode('utf-8'), user['password'].encode('utf-8')):
            return False, "Invalid email or password"

        if not user.get('is_active', True):
            return False, "Account is deactivated"

        user.pop('password')
        logger.info("✅ User logged in: %s", email)
        return True, user

    @backend_call
    def get_user(self, email):
        email = (email or '').strip().lower()
        if not email:
            return None
        user = self._get('users', email)
        if user:
            user.pop('password', None)
        return user

    # ------------------------------------------------------------------
    # Admin users
    # ------------------------------------------------------------------
    def is_admin(self, uid):
        """Check if a user is an admin. Any failure counts as 'no'."""
        if not uid:
            return False
        try:
            return self._get('admin_users', str(uid)) is not None
        except ClientError as e:
            logger.error("❌ Error checking admin status: %s", e)
            return False

    def add_admin(self, uid):
        try:
            self.tables['admin_users'].put_item(Item={'user_id': str(uid), 'created_at': _now()})
        except ClientError as e:
            logger.error("❌ Error adding admin: %s", e)
            return False
        logger.info("✅ Granted admin to user %s", uid)
        return True

    def _require_admin(self, uid, action):
        if not self.is_admin(uid):
            logger.warning("Denied %s for user %s", action, uid)
            raise PermissionDeniedError(f"Only administrators can {action}")

    # ------------------------------------------------------------------
    # Movies
    # ------------------------------------------------------------------
    @backend_call
    def get_movies(self):
        movies = self._scan('movies')
        movies.sort(key=lambda m: m.get('title', '').lower())
        logger.info("Retrieved %d movies", len(movies))
        return movies

    def get_top_rated_movies(self, limit=5):
        # unrated movies sort last
        movies = sorted(
            self.get_movies(),
            key=lambda m: (m.get('rating') is not None, m.get('rating') or 0),
            reverse=True,
        )
        return movies[:limit] if limit else movies

    def get_new_releases(self, limit=5):
        movies = sorted(self.get_movies(), key=lambda m: m.get('year') or 0, reverse=True)
        return movies[:limit] if limit else movies

    @backend_call
    def get_movie_by_id(self, movie_id):
        if not movie_id:
            raise InvalidIdError("Invalid movie ID")
        if not is_valid_uuid(movie_id):
            raise InvalidIdError(f"Movie ID '{movie_id}' is not in valid UUID format")

        movie = self._get('movies', str(movie_id))
        if not movie:
            raise NotFoundError(f"No movie found with ID: {movie_id}")
        return movie

    def search_movies(self, query='', genre=None):
        """Case-insensitive title search plus exact genre match ('All' = any)"""
        query = (query or '').strip().lower()
        genre = (genre or '').strip()
        results = []
        for movie in self.get_movies():
            if query and query not in movie.get('title', '').lower():
                continue
            if genre and genre.lower() != 'all' and genre not in movie.get('genres', []):
                continue
            results.append(movie)
        return results

    def get_genres(self):
        return sorted({g for m in self.get_movies() for g in m.get('genres', [])})

    @backend_call
    def count_movies(self):
        table = self.tables['movies']
        response = table.scan(Select='COUNT')
        count = response.get('Count', 0)
        while 'LastEvaluatedKey' in response:
            response = table.scan(Select='COUNT', ExclusiveStartKey=response['LastEvaluatedKey'])
            count += response.get('Count', 0)
        return count

    @staticmethod
    def _movie_fields(movie_data):
        return {k: movie_data[k] for k in MOVIE_FIELDS if k in movie_data}

    @backend_call
    def admin_create_movie(self, uid, movie_data):
        self._require_admin(uid, "create movies")

        movie = {k: None for k in MOVIE_FIELDS}
        movie['genres'] = []
        movie.update(self._movie_fields(movie_data))
        missing = [f for f in MOVIE_REQUIRED_FIELDS if movie.get(f) in (None, '')]
        if missing:
            raise BackendError(f"Missing required movie fields: {', '.join(missing)}")

        timestamp = _now()
        movie.update({
            'movie_id': movie_data.get('movie_id') or str(uuid.uuid4()),
            'created_at': timestamp,
            'updated_at': timestamp,
        })
        self.tables['movies'].put_item(Item=_to_item(movie))
        logger.info("✅ Movie created: %s (%s)", movie['title'], movie['movie_id'])
        return movie

    @backend_call
    def admin_update_movie(self, uid, movie_id, movie_data):
        self._require_admin(uid, "update movies")

        movie = self.get_movie_by_id(movie_id)
        movie.update(self._movie_fields(movie_data))
        missing = [f for f in MOVIE_REQUIRED_FIELDS if movie.get(f) in (None, '')]
        if missing:
            raise BackendError(f"Missing required movie fields: {', '.join(missing)}")
        movie['updated_at'] = _now()

        self.tables['movies'].put_item(Item=_to_item(movie))
        logger.info("✅ Movie updated: %s", movie_id)
        return movie

    @backend_call
    def admin_delete_movie(self, uid, movie_id):
        """Delete a movie together with its cast members and reviews"""
        self._require_admin(uid, "delete movies")

        movie = self.get_movie_by_id(movie_id)
        for name, key in (('cast_members', 'cast_id'), ('reviews', 'review_id')):
            rows = self._scan(name, Attr('movie_id').eq(movie['movie_id']))
            with self.tables[name].batch_writer() as batch:
                for row in rows:
                    batch.delete_item(Key={key: row[key]})

        self.tables['movies'].delete_item(Key={'movie_id': movie['movie_id']})
        logger.info("✅ Movie deleted: %s", movie_id)
        return movie

    @backend_call
    def seed_movies(self, movies_data):
        """Load seed movies (with nested cast) into an empty movies table"""
        if self.tables['movies'].scan(Limit=1).get('Items'):
            return 0

        timestamp = _now()
        with self.tables['movies'].batch_writer() as movies_batch, \
                self.tables['cast_members'].batch_writer() as cast_batch:
            for data in movies_data:
                movie = {k: data.get(k) for k in MOVIE_FIELDS}
                movie['genres'] = data.get('genres', [])
                movie.update({
                    'movie_id': data.get('movie_id') or str(uuid.uuid4()),
                    'created_at': timestamp,
                    'updated_at': timestamp,
                })
                movies_batch.put_item(Item=_to_item(movie))
                for member in data.get('cast', []):
                    cast_batch.put_item(Item={
                        'cast_id': str(uuid.uuid4()),
                        'movie_id': movie['movie_id'],
                        'name': member['name'],
                        'character': member['character'],
                        'profile_path': member.get('profile_path'),
                        'created_at': timestamp,
                    })
        logger.info("✅ %d movies added to database", len(movies_data))
        return len(movies_data)

    # ------------------------------------------------------------------
    # Cast
    # ------------------------------------------------------------------
    @backend_call
    def get_cast_by_movie_id(self, movie_id):
        if not movie_id:
            raise InvalidIdError("Invalid movie ID")
        cast = self._scan('cast_members', Attr('movie_id').eq(str(movie_id)))
        cast.sort(key=lambda c: c.get('created_at', ''))
        logger.info("Retrieved %d cast members for movie %s", len(cast), movie_id)
        return cast

    @backend_call
    def add_cast_member(self, uid, movie_id, name, character, profile_path=None):
        self._require_admin(uid, "manage cast")
        self.get_movie_by_id(movie_id)

        name = (name or '').strip()
        character = (character or '').strip()
        if not name or not character:
            raise BackendError("Cast members need a name and a character")

        member = {
            'cast_id': str(uuid.uuid4()),
            'movie_id': str(movie_id),
            'name': name,
            'character': character,
            'profile_path': (profile_path or '').strip() or None,
            'created_at': _now(),
        }
        self.tables['cast_members'].put_item(Item=member)
        logger.info("✅ Cast member %s added to movie %s", name, movie_id)
        return member

    @backend_call
    def delete_cast_member(self, uid, cast_id):
        self._require_admin(uid, "manage cast")
        member = self._get('cast_members', str(cast_id))
        if not member:
            raise NotFoundError(f"No cast member found with id: {cast_id}")
        self.tables['cast_members'].delete_item(Key={'cast_id': member['cast_id']})
        return member

    # ------------------------------------------------------------------
    # Reviews
    # ------------------------------------------------------------------
    @backend_call
    def get_reviews_by_movie_id(self, movie_id, only_approved=True):
        if not movie_id:
            raise InvalidIdError("Invalid movie ID")

        condition = Attr('movie_id').eq(str(movie_id))
        if only_approved:
            condition = condition & Attr('is_approved').eq(True)

        reviews = self._scan('reviews', condition)
        reviews.sort(key=lambda r: r.get('created_at', ''), reverse=True)
        logger.info("Retrieved %d reviews for movie %s (only approved: %s)",
                    len(reviews), movie_id, only_approved)
        return reviews

    @backend_call
    def add_review(self, movie_id, username, rating, comment=None, user_id=None):
        """Insert a review. New reviews always start out pending."""
        movie = self.get_movie_by_id(movie_id)

        username = (username or '').strip()
        if not username:
            raise BackendError("Please enter a username")
        if isinstance(rating, bool) or not isinstance(rating, int) \
                or not MIN_REVIEW_RATING <= rating <= MAX_REVIEW_RATING:
            raise BackendError(f"Rating must be an integer between {MIN_REVIEW_RATING} and {MAX_REVIEW_RATING}")

        review = {
            'review_id': str(uuid.uuid4()),
            'movie_id': movie['movie_id'],
            'user_id': user_id,
            'username': username,
            'rating': rating,
            'comment': (comment or '').strip() or None,
            'is_approved': False,
            'created_at': _now(),
        }
        self.tables['reviews'].put_item(Item=review)
        logger.info("✅ Review submitted: %s for movie %s", review['review_id'], movie_id)
        return review

    @backend_call
    def get_all_reviews(self, uid, approved=None):
        """All reviews (admin), newest first, each with its movie title.

        ``approved`` filters on ``is_approved`` when it is a bool. Reviews
        whose movie no longer exists are left out.
        """
        self._require_admin(uid, "list reviews")

        condition = Attr('is_approved').eq(approved) if isinstance(approved, bool) else None
        reviews = self._scan('reviews', condition)
        titles = {m['movie_id']: m.get('title') for m in self._scan('movies')}

        joined = []
        for review in reviews:
            if review.get('movie_id') not in titles:
                continue
            review['movie_title'] = titles[review['movie_id']]
            joined.append(review)

        joined.sort(key=lambda r: r.get('created_at', ''), reverse=True)
        logger.info("Retrieved %d reviews (approved filter: %s)", len(joined), approved)
        return joined

    @backend_call
    def update_review_approval(self, uid, review_id, is_approved):
        self._require_admin(uid, "moderate reviews")

        existing = self._get('reviews', str(review_id))
        if not existing:
            raise NotFoundError(f"No review found with id: {review_id}")

        # Already in the desired state
        if existing.get('is_approved') == is_approved:
            logger.info("Review %s is already %s", review_id, 'approved' if is_approved else 'pending')
            return existing

        response = self.tables['reviews'].update_item(
            Key={'review_id': existing['review_id']},
            UpdateExpression="SET is_approved = :approved",
            ExpressionAttributeValues={':approved': bool(is_approved)},
            ReturnValues='ALL_NEW',
        )
        logger.info("✅ Review %s approval set to %s", review_id, is_approved)
        return _plain(response['Attributes'])

    @backend_call
    def reject_review(self, uid, review_id):
        """Reject (remove) a review"""
        self._require_admin(uid, "moderate reviews")

        existing = self._get('reviews', str(review_id))
        if not existing:
            raise NotFoundError(f"No review found with id: {review_id}")

        self.tables['reviews'].delete_item(Key={'review_id': existing['review_id']})
        logger.info("✅ Review %s rejected", review_id)
        return existing
