"""
Sign up, sign in and access decorators
"""
import functools
import logging

from flask import (
    Blueprint, flash, jsonify, redirect, render_template, request, session, url_for,
)

from .extensions import get_backend

logger = logging.getLogger(__name__)

auth_bp = Blueprint('auth', __name__)


def is_logged_in():
    """Check if user is logged in"""
    return 'user_id' in session


def current_user_id():
    return session.get('user_id')


def login_required(view):
    @functools.wraps(view)
    def wrapped(*args, **kwargs):
        if not is_logged_in():
            if request.is_json or request.path.startswith('/api/'):
                return jsonify({'success': False, 'error': 'Not authenticated'}), 401
            flash('Please login to continue!', 'info')
            return redirect(url_for('auth.login', next=request.path))
        return view(*args, **kwargs)
    return wrapped


def admin_required(view):
    """Signed in and listed in admin_users (checked on every request)"""
    @functools.wraps(view)
    @login_required
    def wrapped(*args, **kwargs):
        is_admin = get_backend().is_admin(current_user_id())
        session['is_admin'] = is_admin
        if not is_admin:
            if request.is_json or request.path.startswith('/api/'):
                return jsonify({'success': False, 'error': 'Admin access required'}), 403
            flash('You need administrator access for that page.', 'danger')
            return redirect(url_for('main.index'))
        return view(*args, **kwargs)
    return wrapped


def _form_data():
    """Handle JSON request (AJAX) or form request. None for a JSON body that is not an object"""
    if request.is_json:
        data = request.get_json(silent=True)
        return data if isinstance(data, dict) else None
    return request.form


def _text(data, field):
    value = data.get(field)
    return value if isinstance(value, str) else ''


@auth_bp.route('/register', methods=['GET', 'POST'])
def register():
    if request.method == 'POST':
        data = _form_data()
        if data is None:
            return jsonify({'success': False, 'error': 'Request body must be a JSON object'}), 400
        email = _text(data, 'email').strip().lower()
        password = _text(data, 'password')
        confirm_password = _text(data, 'confirm_password')

        success, message = get_backend().register_user(email, password, confirm_password)

        if request.is_json:
            if success:
                flash('Registration successful! Please login.', 'success')
                return jsonify({'success': True, 'redirect': url_for('auth.login')})
            return jsonify({'success': False, 'error': message}), 400

        if success:
            flash('Registration successful! Please login.', 'success')
            return redirect(url_for('auth.login'))
        flash(message, 'danger')
        return render_template('register.html', email=email), 400

    return render_template('register.html')


@auth_bp.route('/login', methods=['GET', 'POST'])
def login():
    if request.method == 'POST':
        data = _form_data()
        if data is None:
            return jsonify({'success': False, 'error': 'Request body must be a JSON object'}), 400
        email = _text(data, 'email').strip().lower()
        password = _text(data, 'password')

        success, result = get_backend().login_user(email, password)

        if success:
            user = result
            session.clear()
            session['user_id'] = user['user_id']
            session['user_email'] = user['email']
            session['is_admin'] = get_backend().is_admin(user['user_id'])

            next_url = request.args.get('next') or ''
            if not next_url.startswith('/') or next_url.startswith('//'):
                next_url = url_for('main.index')

            flash('Login successful! Welcome back!', 'success')
            if request.is_json:
                return jsonify({'success': True, 'redirect': next_url})
            return redirect(next_url)

        if request.is_json:
            return jsonify({'success': False, 'error': result}), 401
        flash(result, 'danger')
        return render_template('login.html', email=email), 401

    return render_template('login.html')


@auth_bp.route('/logout')
def logout():
    session.clear()
    flash('Logged out successfully!', 'info')
    return redirect(url_for('main.index'))


@auth_bp.route('/profile')
@login_required
def profile():
    user = get_backend().get_user(session['user_email'])
    if not user:
        session.clear()
        flash('Your account could not be found. Please login again.', 'danger')
        return redirect(url_for('auth.login'))

    is_admin = get_backend().is_admin(user['user_id'])
    session['is_admin'] = is_admin
    return render_template('profile.html', user=user, is_admin=is_admin)
