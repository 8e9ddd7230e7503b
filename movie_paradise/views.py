"""
Public pages: home, catalog, movie detail and review submission
"""
import logging

from flask import (
    Blueprint, current_app, flash, jsonify, redirect, render_template, request, url_for,
)

from .auth import current_user_id
from .backend import BackendError, InvalidIdError, NotFoundError
from .extensions import get_backend, limiter
from .validation import (
    DEFAULT_REVIEW_RATING,
    MAX_REVIEW_RATING,
    MIN_REVIEW_RATING,
    validate_review_form,
)

logger = logging.getLogger(__name__)

main_bp = Blueprint('main', __name__)


def review_rate_limit():
    return current_app.config['REVIEW_RATE_LIMIT']


def _review_form_context(movie_id, form=None, errors=None):
    backend = get_backend()
    movie = backend.get_movie_by_id(movie_id)
    return {
        'movie': movie,
        'cast': backend.get_cast_by_movie_id(movie['movie_id']),
        'reviews': backend.get_reviews_by_movie_id(movie['movie_id']),
        'form': form or {'rating': DEFAULT_REVIEW_RATING},
        'errors': errors or {},
        'rating_choices': range(MIN_REVIEW_RATING, MAX_REVIEW_RATING + 1),
    }


@main_bp.route('/')
def index():
    backend = get_backend()
    limit = current_app.config['HOME_SECTION_LIMIT']
    try:
        top_rated = backend.get_top_rated_movies(limit)
        new_releases = backend.get_new_releases(limit)
    except BackendError as e:
        flash(f"Could not load movies: {e}", 'danger')
        top_rated, new_releases = [], []

    featured = next((m for m in top_rated if m.get('background_url')), None)
    if featured is None and top_rated:
        featured = top_rated[0]

    return render_template(
        'index.html',
        featured=featured,
        top_rated=top_rated,
        new_releases=new_releases,
    )


@main_bp.route('/browse')
@main_bp.route('/movies')
def movies():
    query = request.args.get('q', '').strip()
    genre = request.args.get('genre', 'All').strip() or 'All'

    genres = list(current_app.config['MOVIE_GENRES'])
    backend = get_backend()
    try:
        results = backend.search_movies(query, genre)
        # labels admins typed that are not in the configured list
        genres += [g for g in backend.get_genres() if g not in genres]
    except BackendError as e:
        flash(f"Could not load movies: {e}", 'danger')
        results = []

    return render_template(
        'movies.html',
        movies=results,
        query=query,
        current_genre=genre,
        genres=['All'] + genres,
    )


@main_bp.route('/top-rated')
def top_rated():
    try:
        results = get_backend().get_top_rated_movies(limit=None)
    except BackendError as e:
        flash(f"Could not load movies: {e}", 'danger')
        results = []
    return render_template('movie_list.html', title='Top Rated Movies', movies=results)


@main_bp.route('/new-releases')
def new_releases():
    try:
        results = get_backend().get_new_releases(limit=None)
    except BackendError as e:
        flash(f"Could not load movies: {e}", 'danger')
        results = []
    return render_template('movie_list.html', title='New Releases', movies=results)


@main_bp.route('/movie/<movie_id>')
def movie_detail(movie_id):
    try:
        context = _review_form_context(movie_id)
    except (NotFoundError, InvalidIdError):
        flash("Movie not found!", "danger")
        return redirect(url_for('main.movies'))
    except BackendError as e:
        flash(str(e), 'danger')
        return redirect(url_for('main.movies'))

    return render_template('movie_detail.html', **context)


@main_bp.route('/movie/<movie_id>/reviews', methods=['POST'])
@limiter.limit(review_rate_limit)
def submit_review(movie_id):
    if request.is_json:
        form = request.get_json(silent=True)
        if not isinstance(form, dict):
            return jsonify({'success': False, 'error': 'Request body must be a JSON object'}), 400
    else:
        form = request.form
    data, errors = validate_review_form(form)

    if errors:
        if request.is_json:
            return jsonify({'success': False, 'errors': errors}), 400
        for message in errors.values():
            flash(message, 'danger')
        try:
            context = _review_form_context(movie_id, form=form, errors=errors)
        except BackendError:
            flash("Movie not found!", "danger")
            return redirect(url_for('main.movies'))
        return render_template('movie_detail.html', **context), 400

    try:
        review = get_backend().add_review(
            movie_id,
            data['username'],
            data['rating'],
            comment=data['comment'],
            user_id=current_user_id(),
        )
    except (NotFoundError, InvalidIdError):
        if request.is_json:
            return jsonify({'success': False, 'error': 'Movie not found'}), 404
        flash("Movie not found!", "danger")
        return redirect(url_for('main.movies'))
    except BackendError as e:
        if request.is_json:
            return jsonify({'success': False, 'error': str(e)}), 400
        flash(f"Failed to submit your review: {e}", 'danger')
        return redirect(url_for('main.movie_detail', movie_id=movie_id))

    if request.is_json:
        return jsonify({'success': True, 'review': review}), 201

    flash('Your review has been submitted and is pending approval', 'success')
    return redirect(url_for('main.movie_detail', movie_id=movie_id))
