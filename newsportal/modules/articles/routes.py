"""
Article Admin Routes
====================

Listing, creation, editing and deletion of articles for logged-in admins.
"""

import sqlite3

from flask import abort, render_template, request, redirect, url_for
from werkzeug.exceptions import RequestEntityTooLarge, UnsupportedMediaType

from . import articles_bp
from .database import ArticleDatabase, missing_required
from ..auth.utils import admin_required
from ...core.logging_service import logger
from ...core.storage import discard_image, has_upload, image_from_request

FORM_FIELDS = ('title', 'subtitle', 'body', 'image_url', 'video_url', 'author')
REQUIRED_MESSAGE = 'Title, body and author are required'

# Query-string flags shown as banners on the listing page
STATUS_FLAGS = ('created', 'updated', 'deleted')


def _form_fields():
    return {name: request.form.get(name, '') for name in FORM_FIELDS}


def _render_form(article, error, status, mode):
    return render_template(
        'articles/form.html',
        article=article,
        error=error,
        mode=mode,
    ), status


@articles_bp.route('/')
@admin_required
def article_list():
    """All articles, newest first"""
    flags = {flag: bool(request.args.get(flag)) for flag in STATUS_FLAGS}
    error = request.args.get('error')

    try:
        articles = ArticleDatabase.list_latest(limit=None)
    except sqlite3.Error as e:
        logger.log_error_with_traceback('articles', e)
        return render_template('articles/list.html', articles=[], flags=flags,
                               error='load'), 500

    return render_template('articles/list.html', articles=articles, flags=flags, error=error)


@articles_bp.route('/new', methods=['GET', 'POST'])
@admin_required
def new_article():
    if request.method == 'GET':
        return render_template('articles/form.html', article=None, error=None, mode='new')

    fields = _form_fields()
    if missing_required(fields):
        return _render_form(fields, REQUIRED_MESSAGE, 400, 'new')

    try:
        fields['image_url'] = image_from_request(request)
    except (UnsupportedMediaType, RequestEntityTooLarge) as e:
        return _render_form(fields, e.description, e.code, 'new')
    except OSError as e:
        logger.log_error_with_traceback('uploads', e)
        return _render_form(fields, 'Could not save the image. Please try again.', 500, 'new')

    try:
        article_id = ArticleDatabase.create(fields)
    except (sqlite3.Error, ValueError) as e:
        logger.log_error_with_traceback('articles', e)
        if has_upload(request):
            discard_image(fields['image_url'])
            fields['image_url'] = request.form.get('image_url', '')
        return _render_form(fields, 'Could not create the article. Please try again.', 500, 'new')

    logger.info('articles', f"Article {article_id} created from admin panel")
    return redirect(url_for('articles_admin.article_list', created=1))


@articles_bp.route('/<int:article_id>/edit', methods=['GET', 'POST'])
@admin_required
def edit_article(article_id):
    current = ArticleDatabase.get_by_id(article_id)
    if current is None:
        abort(404)

    if request.method == 'GET':
        return render_template('articles/form.html', article=current, error=None, mode='edit')

    fields = _form_fields()
    submitted = {**current, **fields}
    if not fields['image_url']:
        submitted['image_url'] = current['image_url']
    if missing_required(fields):
        return _render_form(submitted, REQUIRED_MESSAGE, 400, 'edit')

    try:
        fields['image_url'] = image_from_request(request, fallback=current['image_url'])
    except (UnsupportedMediaType, RequestEntityTooLarge) as e:
        return _render_form(submitted, e.description, e.code, 'edit')
    except OSError as e:
        logger.log_error_with_traceback('uploads', e)
        return _render_form(submitted, 'Could not save the image. Please try again.', 500, 'edit')

    try:
        changes = ArticleDatabase.update(article_id, fields)
    except (sqlite3.Error, ValueError) as e:
        logger.log_error_with_traceback('articles', e)
        if has_upload(request):
            discard_image(fields['image_url'])
        return _render_form(submitted, 'Could not update the article. Please try again.', 500, 'edit')

    if changes == 0:
        logger.warning('articles', f"Article {article_id} vanished before update")
        if has_upload(request):
            discard_image(fields['image_url'])
        return redirect(url_for('articles_admin.article_list', error='update'))

    return redirect(url_for('articles_admin.article_list', updated=1))


@articles_bp.route('/<int:article_id>/delete', methods=['POST'])
@articles_bp.route('/<int:article_id>/exclude', methods=['POST'])
@admin_required
def delete_article(article_id):
    """Delete is idempotent: a missing id redirects like a real delete"""
    try:
        ArticleDatabase.delete(article_id)
    except sqlite3.Error as e:
        logger.log_error_with_traceback('articles', e)
        return redirect(url_for('articles_admin.article_list', error='delete'))

    return redirect(url_for('articles_admin.article_list', deleted=1))
