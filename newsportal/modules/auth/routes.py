from flask import current_app, render_template, request, redirect, url_for, session
import secrets
import sqlite3

from . import auth_bp
from .database import AccountDatabase
from .utils import hash_password, verify_password, is_authenticated
from ...core.logging_service import logger

INVALID_CREDENTIALS = 'Invalid username or password'
MISSING_CREDENTIALS = 'Please enter username and password'

# Compared against when the username does not exist, so both failure
# paths cost one hash verification.
_dummy_hash = None


def _get_dummy_hash():
    global _dummy_hash
    if _dummy_hash is None:
        _dummy_hash = hash_password(secrets.token_hex(16))
    return _dummy_hash


def _safe_next(target):
    """Only same-site absolute paths are followed after login"""
    if target and target.startswith('/') and not target.startswith('//'):
        return target
    return url_for('articles_admin.article_list')


@auth_bp.route('/login', methods=['GET', 'POST'])
def login():
    """Admin login route"""
    if request.method == 'GET':
        if is_authenticated():
            return redirect(url_for('articles_admin.article_list'))
        return render_template('auth/login.html', error=None, username='')

    username = request.form.get('username', '').strip()
    password = request.form.get('password', '')

    if not username or not password:
        return render_template('auth/login.html', error=MISSING_CREDENTIALS,
                               username=username), 400

    try:
        account = AccountDatabase.find_by_username(username)
    except sqlite3.Error as e:
        logger.log_error_with_traceback('auth', e)
        return render_template('auth/login.html', error='Login failed. Please try again.',
                               username=username), 500

    if account is None:
        verify_password(_get_dummy_hash(), password)
        logger.log_security_event('Failed login', {'username': username, 'reason': 'unknown user'})
        return render_template('auth/login.html', error=INVALID_CREDENTIALS,
                               username=username), 401

    if not verify_password(account['password_hash'], password):
        logger.log_security_event('Failed login', {'username': username, 'reason': 'bad password'})
        return render_template('auth/login.html', error=INVALID_CREDENTIALS,
                               username=username), 401

    session.clear()
    session['user_id'] = account['id']
    session['username'] = account['username']
    session.permanent = True

    logger.log_user_action('auth', 'login', username=account['username'])
    return redirect(_safe_next(request.args.get('next')))


@auth_bp.route('/logout')
def logout():
    """Destroy the session and go back to the login form"""
    username = session.get('username')
    session.clear()
    if username:
        logger.log_user_action('auth', 'logout', username=username)
    return redirect(url_for('auth.login'))


@auth_bp.route('/admin/setup-user')
def setup_user():
    """Create the first admin account. Refuses once any account exists."""
    if AccountDatabase.count_accounts() > 0:
        logger.log_security_event('Setup attempted with existing accounts')
        return render_template('auth/setup.html', created=False), 403

    username = current_app.config['ADMIN_USERNAME']
    configured_password = current_app.config.get('ADMIN_PASSWORD')
    password = configured_password or secrets.token_urlsafe(12)

    try:
        account_id = AccountDatabase.create_account(username, hash_password(password))
    except sqlite3.Error as e:
        logger.log_error_with_traceback('auth', e)
        return render_template('auth/setup.html', created=False,
                               error='Could not create the admin account.'), 500

    logger.log_user_action('auth', 'setup', username=username, details={'id': account_id})

    # A generated password is shown once so the operator can log in;
    # a configured one is never echoed back.
    return render_template(
        'auth/setup.html',
        created=True,
        username=username,
        password=None if configured_password else password,
    )
