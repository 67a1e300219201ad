"""
Auth Module
===========

Session-based admin authentication:
- Username/password login against a salted password hash
- Logout
- One-time creation of the first admin account
- ``admin_required`` decorator for the admin blueprints
"""

from flask import Blueprint

auth_bp = Blueprint(
    'auth',
    __name__,
    template_folder='templates'
)

from . import routes
from .database import AccountDatabase
from .utils import admin_required

__all__ = ['auth_bp', 'AccountDatabase', 'admin_required']
