import re
import sqlite3

from flask import current_app, render_template, jsonify, request
from flask_cors import cross_origin
from markupsafe import Markup, escape
from werkzeug.exceptions import RequestEntityTooLarge, UnsupportedMediaType

from . import news_public_bp
from ..articles.database import MAX_SQLITE_INTEGER, ArticleDatabase, missing_required
from ...core.logging_service import logger
from ...core.storage import discard_image, has_upload, image_from_request

YOUTUBE_RE = re.compile(
    r'(?:youtube\.com/(?:[^/]+/.+/|(?:v|e(?:mbed)?)/|.*[?&]v=)|youtu\.be/)([^"&?/\s]{11})'
)
VIMEO_RE = re.compile(r'vimeo\.com/(\d+)')

ARTICLE_FIELDS = ('title', 'subtitle', 'body', 'image_url', 'video_url', 'author')


def format_content(content):
    """Escape the body and turn line breaks into paragraphs / <br> tags"""
    if not content:
        return Markup('')

    text = str(escape(content)).replace('\r\n', '\n')

    # Replace multiple line breaks with paragraph breaks
    text = re.sub(r'\n\s*\n', '</p><p>', text)

    # Replace single line breaks with <br> tags
    text = text.replace('\n', '<br>')

    text = f'<p>{text}</p>'

    # Clean up empty paragraphs
    text = re.sub(r'<p>\s*</p>', '', text)
    return Markup(text)


def video_embed_url(url):
    """Embeddable player URL for a YouTube or Vimeo link, '' otherwise"""
    if not url:
        return ''

    match = YOUTUBE_RE.search(url)
    if match:
        return f'https://www.youtube.com/embed/{match.group(1)}'

    match = VIMEO_RE.search(url)
    if match:
        return f'https://player.vimeo.com/video/{match.group(1)}'

    return ''


@news_public_bp.app_template_filter('format_content')
def format_content_filter(content):
    return format_content(content)


@news_public_bp.app_template_filter('video_embed_url')
def video_embed_url_filter(url):
    return video_embed_url(url)


def _not_found_page():
    return render_template('news_public/not_found.html'), 404


# ===== Pages =====

@news_public_bp.route('/')
def home():
    """Public home page with the latest articles"""
    articles = ArticleDatabase.list_latest(current_app.config['HOME_LIMIT'])
    return render_template('news_public/index.html', articles=articles)


@news_public_bp.route('/articles')
def article_list():
    articles = ArticleDatabase.list_latest(current_app.config['ARTICLES_PAGE_LIMIT'])
    return render_template('news_public/articles.html', articles=articles)


@news_public_bp.route('/article')
@news_public_bp.route('/articles/<int:article_id>')
def article_detail(article_id=None):
    """Article page; the id comes from the path or from ?id="""
    if article_id is None:
        article_id = request.args.get('id', type=int)
    if article_id is None:
        return _not_found_page()

    article = ArticleDatabase.get_by_id(article_id)
    if article is None:
        return _not_found_page()

    return render_template('news_public/article.html', article=article)


# ===== JSON API =====

@news_public_bp.route('/api/articles', methods=['GET'])
@cross_origin()
def api_list_articles():
    """Latest articles as JSON. ?limit=N, default API_DEFAULT_LIMIT."""
    raw_limit = request.args.get('limit')
    limit = current_app.config['API_DEFAULT_LIMIT']
    if raw_limit is not None:
        try:
            limit = int(raw_limit)
        except ValueError:
            limit = 0
        if not 1 <= limit <= MAX_SQLITE_INTEGER:
            return jsonify({'error': 'limit must be a positive integer'}), 400

    try:
        articles = ArticleDatabase.list_latest(limit)
    except sqlite3.Error as e:
        logger.log_error_with_traceback('api', e)
        return jsonify({'error': 'Failed to load articles'}), 500

    return jsonify(articles)


@news_public_bp.route('/api/articles/<int:article_id>', methods=['GET'])
@cross_origin()
def api_get_article(article_id):
    try:
        article = ArticleDatabase.get_by_id(article_id)
    except sqlite3.Error as e:
        logger.log_error_with_traceback('api', e)
        return jsonify({'error': 'Failed to load article'}), 500

    if article is None:
        return jsonify({'error': 'Article not found'}), 404
    return jsonify(article)


@news_public_bp.route('/api/articles', methods=['POST'])
def api_create_article():
    """Create an article from a JSON body or a (multipart) form"""
    data = request.get_json(silent=True)
    from_form = data is None
    if from_form:
        data = request.form
    elif not isinstance(data, dict):
        return jsonify({'error': 'Expected a JSON object'}), 400

    not_text = [name for name in ARTICLE_FIELDS
                if data.get(name) is not None and not isinstance(data.get(name), str)]
    if not_text:
        return jsonify({'error': f"Fields must be strings: {', '.join(not_text)}"}), 400

    fields = {name: data.get(name) or '' for name in ARTICLE_FIELDS}
    if missing_required(fields):
        return jsonify({
            'error': 'Missing required fields: title, body and author are required'
        }), 400

    if from_form:
        try:
            fields['image_url'] = image_from_request(request)
        except (UnsupportedMediaType, RequestEntityTooLarge) as e:
            return jsonify({'error': e.description}), e.code
        except OSError as e:
            logger.log_error_with_traceback('uploads', e)
            return jsonify({'error': 'Failed to save image'}), 500

    try:
        article_id = ArticleDatabase.create(fields)
    except (sqlite3.Error, ValueError) as e:
        logger.log_error_with_traceback('api', e)
        if from_form and has_upload(request):
            discard_image(fields['image_url'])
        return jsonify({'error': 'Failed to create article'}), 500

    return jsonify({
        'id': article_id,
        'message': 'Article created successfully',
        'title': fields['title'],
    }), 201
