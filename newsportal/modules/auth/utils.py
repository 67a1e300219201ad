from functools import wraps

from flask import redirect, request, session, url_for
from werkzeug.security import check_password_hash, generate_password_hash


def hash_password(password):
    """Salted one-way hash; the plaintext is never stored"""
    return generate_password_hash(password)


def verify_password(password_hash, password):
    """Constant-time check of ``password`` against a stored hash"""
    if not password_hash or password is None:
        return False
    return check_password_hash(password_hash, password)


def is_authenticated():
    return 'user_id' in session


def admin_required(f):
    """Decorator to require an authenticated admin session"""
    @wraps(f)
    def decorated_function(*args, **kwargs):
        if not is_authenticated():
            return redirect(url_for('auth.login', next=request.full_path.rstrip('?')))
        return f(*args, **kwargs)
    return decorated_function
