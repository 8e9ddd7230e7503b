from movie_paradise.validation import (
    is_valid_email,
    is_valid_uuid,
    parse_genres,
    validate_credentials,
    validate_movie_form,
    validate_review_form,
)

VALID_MOVIE_FORM = {
    'title': ' Dune ',
    'year': '2021',
    'rating': '8.04',
    'tagline': '',
    'duration': '2h 35m',
    'genres': 'Sci-Fi, Adventure,, ',
    'overview': 'Spice.',
    'poster_url': 'https://example.com/dune.jpg',
    'background_url': '  ',
    'trailer_url': 'https://example.com/trailer',
    'download_url': '',
}


def test_email_and_uuid_checks():
    assert is_valid_email('someone@example.com')
    assert not is_valid_email('someone@')
    assert not is_valid_email(None)
    assert is_valid_uuid('0b7c6f0e-8d8a-4f55-9a53-3f0c2f5e9d11')
    assert not is_valid_uuid('1')
    assert not is_valid_uuid(None)


def test_parse_genres_drops_blanks():
    assert parse_genres('Action, Adventure,, Sci-Fi ,') == ['Action', 'Adventure', 'Sci-Fi']
    assert parse_genres('') == []
    assert parse_genres(None) == []


def test_validate_credentials():
    assert validate_credentials('a@b.co', 'secret1') is None
    assert validate_credentials('a@b.co', 'secret1', 'secret1') is None
    assert validate_credentials('bad', 'secret1') == "Invalid email format"
    assert validate_credentials('a@b.co', 'short') == "Password must be at least 6 characters long"
    assert validate_credentials('a@b.co', 'secret1', 'secret2') == "Passwords don't match"


def test_movie_form_cleans_values():
    data, errors = validate_movie_form(VALID_MOVIE_FORM)

    assert errors == {}
    assert data['title'] == 'Dune'
    assert data['year'] == 2021
    assert data['rating'] == 8.0
    assert data['genres'] == ['Sci-Fi', 'Adventure']
    assert data['tagline'] is None
    assert data['background_url'] is None
    assert data['trailer_url'] == 'https://example.com/trailer'


def test_movie_form_rating_is_optional():
    form = dict(VALID_MOVIE_FORM, rating='')
    data, errors = validate_movie_form(form)
    assert errors == {}
    assert data['rating'] is None


def test_movie_form_required_fields():
    _, errors = validate_movie_form({})
    assert errors == {
        'title': "Title is required",
        'duration': "Duration is required",
        'overview': "Overview is required",
        'poster_url': "Poster URL is required",
        'year': "Year is required",
        'genres': "At least one genre is required",
    }


def test_movie_form_ranges():
    _, errors = validate_movie_form(dict(VALID_MOVIE_FORM, year='1899', rating='10.5'))
    assert errors['year'] == "Year must be after 1900"
    assert errors['rating'] == "Rating must be at most 10"

    _, errors = validate_movie_form(dict(VALID_MOVIE_FORM, year='2101', rating='-1'))
    assert errors['year'] == "Year must be before 2100"
    assert errors['rating'] == "Rating must be at least 0"

    _, errors = validate_movie_form(dict(VALID_MOVIE_FORM, year='soon', rating='great'))
    assert errors['year'] == "Year must be a number"
    assert errors['rating'] == "Rating must be a number"


def test_review_form_defaults_and_blank_comment():
    data, errors = validate_review_form({'username': '  Ana ', 'comment': '   '})
    assert errors == {}
    assert data == {'username': 'Ana', 'rating': 5, 'comment': None}


def test_review_form_errors():
    _, errors = validate_review_form({'username': ' ', 'rating': '11'})
    assert errors['username'] == "Please enter a username"
    assert errors['rating'] == "Rating must be between 1 and 10"

    _, errors = validate_review_form({'username': 'Ana', 'rating': 'ten'})
    assert errors['rating'] == "Invalid rating value!"


def test_review_form_accepts_json_ints():
    data, errors = validate_review_form({'username': 'Ana', 'rating': 10, 'comment': 'Loved it'})
    assert errors == {}
    assert data['rating'] == 10
    assert data['comment'] == 'Loved it'
