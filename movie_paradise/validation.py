"""
Form validation helpers shared by the views and the backend
"""
import re
import uuid

EMAIL_PATTERN = r'^[a-zA-Z0-9._%+-]+@[a-zA-Z0-9.-]+\.[a-zA-Z]{2,}$'
MIN_PASSWORD_LENGTH = 6

MIN_YEAR, MAX_YEAR = 1900, 2100
MIN_MOVIE_RATING, MAX_MOVIE_RATING = 0, 10
MIN_REVIEW_RATING, MAX_REVIEW_RATING = 1, 10
DEFAULT_REVIEW_RATING = 5

OPTIONAL_MOVIE_FIELDS = ('tagline', 'background_url', 'trailer_url', 'download_url')


def is_valid_email(email):
    """Validate email format"""
    return re.match(EMAIL_PATTERN, email or '') is not None


def is_valid_uuid(value):
    try:
        uuid.UUID(str(value))
    except (ValueError, TypeError):
        return False
    return True


def parse_genres(text):
    """Split a comma-separated genre string into a clean list"""
    if not isinstance(text, str):
        return []
    return [g.strip() for g in text.split(',') if g.strip()]


def validate_credentials(email, password, confirm_password=None):
    """Return an error message, or None when the credentials are acceptable"""
    if not is_valid_email(email):
        return "Invalid email format"
    if confirm_password is not None and password != confirm_password:
        return "Passwords don't match"
    if len(password or '') < MIN_PASSWORD_LENGTH:
        return f"Password must be at least {MIN_PASSWORD_LENGTH} characters long"
    return None


def _clean(form, field):
    value = form.get(field)
    if not isinstance(value, str):
        return ''
    return value.strip()


def validate_movie_form(form):
    """Validate the admin movie form.

    Returns ``(data, errors)`` where ``data`` is ready to be handed to the
    backend procedures and ``errors`` maps field names to messages.
    """
    errors = {}
    data = {}

    for field, message in (
        ('title', "Title is required"),
        ('duration', "Duration is required"),
        ('overview', "Overview is required"),
        ('poster_url', "Poster URL is required"),
    ):
        value = _clean(form, field)
        if not value:
            errors[field] = message
        data[field] = value

    year_raw = _clean(form, 'year')
    if not year_raw:
        errors['year'] = "Year is required"
    else:
        try:
            year = int(year_raw)
        except ValueError:
            errors['year'] = "Year must be a number"
        else:
            if year < MIN_YEAR:
                errors['year'] = f"Year must be after {MIN_YEAR}"
            elif year > MAX_YEAR:
                errors['year'] = f"Year must be before {MAX_YEAR}"
            data['year'] = year

    rating_raw = _clean(form, 'rating')
    data['rating'] = None
    if rating_raw:
        try:
            rating = round(float(rating_raw), 1)
        except ValueError:
            errors['rating'] = "Rating must be a number"
        else:
            if rating < MIN_MOVIE_RATING:
                errors['rating'] = f"Rating must be at least {MIN_MOVIE_RATING}"
            elif rating > MAX_MOVIE_RATING:
                errors['rating'] = f"Rating must be at most {MAX_MOVIE_RATING}"
            data['rating'] = rating

    genres = parse_genres(form.get('genres'))
    if not genres:
        errors['genres'] = "At least one genre is required"
    data['genres'] = genres

    for field in OPTIONAL_MOVIE_FIELDS:
        data[field] = _clean(form, field) or None

    return data, errors


def validate_review_form(form):
    """Validate a visitor review. Returns ``(data, errors)``."""
    errors = {}

    username = _clean(form, 'username')
    if not username:
        errors['username'] = "Please enter a username"

    rating_raw = form.get('rating')
    rating = DEFAULT_REVIEW_RATING
    if rating_raw not in (None, ''):
        try:
            rating = int(rating_raw)
        except (ValueError, TypeError):
            errors['rating'] = "Invalid rating value!"
        else:
            if not MIN_REVIEW_RATING <= rating <= MAX_REVIEW_RATING:
                errors['rating'] = f"Rating must be between {MIN_REVIEW_RATING} and {MAX_REVIEW_RATING}"

    data = {
        'username': username,
        'rating': rating,
        'comment': _clean(form, 'comment') or None,
    }
    return data, errors
