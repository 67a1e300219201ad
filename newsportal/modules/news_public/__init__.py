"""
Public News Module
==================

Reader-facing pages (home, listing, article detail) and the JSON API.
"""

from flask import Blueprint

news_public_bp = Blueprint('news', __name__, template_folder='templates')

from . import routes

__all__ = ['news_public_bp']
