from flask import current_app
from flask_limiter import Limiter
from flask_limiter.util import get_remote_address

limiter = Limiter(key_func=get_remote_address)


def get_backend():
    """Hosted backend client bound to the current app"""
    return current_app.extensions['backend']
