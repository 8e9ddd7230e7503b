"""
JSON endpoints, including the moderation feed the dashboard polls
"""
from datetime import datetime

from flask import Blueprint, jsonify, request

from .auth import admin_required, current_user_id
from .backend import BackendError, InvalidIdError, NotFoundError, review_counts
from .extensions import get_backend

api_bp = Blueprint('api', __name__)


@api_bp.errorhandler(BackendError)
def backend_error(e):
    if isinstance(e, (NotFoundError, InvalidIdError)):
        return jsonify({'success': False, 'error': 'Movie not found'}), 404
    return jsonify({'success': False, 'error': str(e)}), 502


@api_bp.route('/api/movies')
def api_movies():
    movies = get_backend().search_movies(request.args.get('q', ''), request.args.get('genre'))
    return jsonify({'success': True, 'movies': movies})


@api_bp.route('/api/movie/<movie_id>')
def api_movie_detail(movie_id):
    backend = get_backend()
    movie = backend.get_movie_by_id(movie_id)
    movie['cast'] = backend.get_cast_by_movie_id(movie_id)
    return jsonify({'success': True, 'movie': movie})


@api_bp.route('/api/movie/<movie_id>/reviews')
def api_movie_reviews(movie_id):
    backend = get_backend()
    backend.get_movie_by_id(movie_id)
    reviews = backend.get_reviews_by_movie_id(movie_id, only_approved=True)
    return jsonify({'success': True, 'reviews': reviews})


@api_bp.route('/api/admin/reviews')
@admin_required
def api_admin_reviews():
    """Pending/approved review lists for the polling moderation view"""
    status = request.args.get('status', 'all')
    approved = {'pending': False, 'approved': True}.get(status)

    everything = get_backend().get_all_reviews(current_user_id())
    if approved is None:
        reviews = everything
    else:
        reviews = [r for r in everything if r.get('is_approved') is approved]
    counts = review_counts(everything)

    response = jsonify({'success': True, 'status': status, 'reviews': reviews, 'counts': counts})
    response.headers['Cache-Control'] = 'no-store'
    return response


@api_bp.route('/health')
def health_check():
    return jsonify({
        'status': 'healthy',
        'storage': 'aws_dynamodb',
        'timestamp': datetime.now().strftime("%Y-%m-%d %H:%M:%S")
    })
