"""
Admin dashboard: movie and cast management, review moderation
"""
import logging

from flask import (
    Blueprint, current_app, flash, jsonify, redirect, render_template, request, url_for,
)

from .auth import admin_required, current_user_id
from .backend import BackendError, InvalidIdError, NotFoundError
from .extensions import get_backend
from .validation import validate_movie_form

logger = logging.getLogger(__name__)

admin_bp = Blueprint('admin', __name__, url_prefix='/admin')


def _movie_form_defaults(movie):
    defaults = dict(movie)
    defaults['genres'] = ', '.join(movie.get('genres', []))
    for field in ('rating', 'tagline', 'background_url', 'trailer_url', 'download_url'):
        if defaults.get(field) is None:
            defaults[field] = ''
    return defaults


@admin_bp.route('/')
@admin_required
def dashboard():
    backend = get_backend()
    uid = current_user_id()
    try:
        reviews = backend.get_all_reviews(uid)
        movies = backend.get_movies()
    except BackendError as e:
        flash(str(e), 'danger')
        reviews, movies = [], []

    return render_template(
        'admin/dashboard.html',
        total_movies=len(movies),
        pending_reviews=[r for r in reviews if not r.get('is_approved')],
        approved_reviews=[r for r in reviews if r.get('is_approved')],
        movies=movies,
        poll_interval=current_app.config['REVIEW_POLL_INTERVAL'],
    )


@admin_bp.route('/movies/new', methods=['GET', 'POST'])
@admin_required
def create_movie():
    if request.method == 'POST':
        data, errors = validate_movie_form(request.form)
        if not errors:
            try:
                movie = get_backend().admin_create_movie(current_user_id(), data)
            except BackendError as e:
                flash(f"Failed to save movie: {e}", 'danger')
            else:
                flash("Movie created successfully", 'success')
                return redirect(url_for('admin.manage_cast', movie_id=movie['movie_id']))
        return render_template('admin/movie_form.html', movie=None, form=request.form, errors=errors), 400

    return render_template('admin/movie_form.html', movie=None, form={}, errors={})


@admin_bp.route('/movies/<movie_id>/edit', methods=['GET', 'POST'])
@admin_required
def edit_movie(movie_id):
    backend = get_backend()
    try:
        movie = backend.get_movie_by_id(movie_id)
    except (NotFoundError, InvalidIdError):
        flash("Movie not found!", "danger")
        return redirect(url_for('admin.dashboard'))
    except BackendError as e:
        flash(str(e), 'danger')
        return redirect(url_for('admin.dashboard'))

    if request.method == 'POST':
        data, errors = validate_movie_form(request.form)
        if not errors:
            try:
                backend.admin_update_movie(current_user_id(), movie_id, data)
            except BackendError as e:
                flash(f"Failed to save movie: {e}", 'danger')
            else:
                flash("Movie updated successfully", 'success')
                return redirect(url_for('admin.dashboard'))
        return render_template('admin/movie_form.html', movie=movie, form=request.form, errors=errors), 400

    return render_template('admin/movie_form.html', movie=movie, form=_movie_form_defaults(movie), errors={})


@admin_bp.route('/movies/<movie_id>/delete', methods=['POST'])
@admin_required
def delete_movie(movie_id):
    try:
        movie = get_backend().admin_delete_movie(current_user_id(), movie_id)
    except (NotFoundError, InvalidIdError):
        flash("Movie not found!", "danger")
    except BackendError as e:
        flash(f"Failed to delete the movie: {e}", 'danger')
    else:
        flash(f'"{movie["title"]}" has been deleted.', 'success')
    return redirect(url_for('admin.dashboard'))


@admin_bp.route('/movies/<movie_id>/cast', methods=['GET', 'POST'])
@admin_required
def manage_cast(movie_id):
    backend = get_backend()
    try:
        movie = backend.get_movie_by_id(movie_id)
        cast = backend.get_cast_by_movie_id(movie_id)
    except (NotFoundError, InvalidIdError):
        flash("Movie not found!", "danger")
        return redirect(url_for('admin.dashboard'))
    except BackendError as e:
        flash(str(e), 'danger')
        return redirect(url_for('admin.dashboard'))

    if request.method == 'POST':
        try:
            member = backend.add_cast_member(
                current_user_id(),
                movie_id,
                request.form.get('name'),
                request.form.get('character'),
                profile_path=request.form.get('profile_path'),
            )
        except BackendError as e:
            flash(str(e), 'danger')
        else:
            flash(f"{member['name']} added to the cast", 'success')
        return redirect(url_for('admin.manage_cast', movie_id=movie_id))

    return render_template('admin/cast.html', movie=movie, cast=cast)


@admin_bp.route('/cast/<cast_id>/delete', methods=['POST'])
@admin_required
def delete_cast_member(cast_id):
    try:
        member = get_backend().delete_cast_member(current_user_id(), cast_id)
    except BackendError as e:
        flash(str(e), 'danger')
        return redirect(url_for('admin.dashboard'))

    flash(f"{member['name']} removed from the cast", 'success')
    return redirect(url_for('admin.manage_cast', movie_id=member['movie_id']))


def _moderate(review_id, action):
    backend = get_backend()
    uid = current_user_id()
    try:
        if action == 'approve':
            review = backend.update_review_approval(uid, review_id, True)
        else:
            review = backend.reject_review(uid, review_id)
    except BackendError as e:
        logger.error("Error updating review %s: %s", review_id, e)
        if request.is_json:
            status = 404 if isinstance(e, NotFoundError) else 400
            return jsonify({'success': False, 'error': str(e)}), status
        flash(f"Failed to update review status: {e}", 'danger')
        return redirect(url_for('admin.dashboard'))

    if request.is_json:
        return jsonify({'success': True, 'review': review})
    flash("Review status updated successfully", 'success')
    return redirect(url_for('admin.dashboard'))


@admin_bp.route('/reviews/<review_id>/approve', methods=['POST'])
@admin_required
def approve_review(review_id):
    return _moderate(review_id, 'approve')


@admin_bp.route('/reviews/<review_id>/reject', methods=['POST'])
@admin_required
def reject_review(review_id):
    return _moderate(review_id, 'reject')
