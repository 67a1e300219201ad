"""
Articles Admin Module
=====================

Admin interface for article management.

Provides:
- Article listing with created/updated/deleted banners
- Article creation and editing with server-side validation
- Image upload for articles
- Hard delete (with an ``exclude`` alias)
"""

from flask import Blueprint

articles_bp = Blueprint(
    'articles_admin',
    __name__,
    url_prefix='/admin/articles',
    template_folder='templates'
)

from . import routes
from .database import ArticleDatabase

__all__ = ['articles_bp', 'ArticleDatabase']
