from datetime import datetime, timezone

from flask import current_app, has_app_context

from ...core.config import Config
from ...core.database import Database
from ...core.logging_service import logger

REQUIRED_FIELDS = ('title', 'body', 'author')
OPTIONAL_FIELDS = ('subtitle', 'image_url', 'video_url')
COLUMNS = 'id, title, subtitle, body, image_url, video_url, published_at, author'

# SQLite INTEGER is a signed 64-bit value
MAX_SQLITE_INTEGER = 2 ** 63 - 1


def utc_now():
    return datetime.now(timezone.utc)


def get_db_config():
    """Path of the articles database"""
    if has_app_context():
        return current_app.config.get('NEWS_DB', Config.NEWS_DB)
    return Config.NEWS_DB


def missing_required(fields):
    """Names of required fields that are absent or blank"""
    return [name for name in REQUIRED_FIELDS if not str(fields.get(name) or '').strip()]


def storable_id(article_id):
    """True if the id can be bound as a SQLite INTEGER"""
    return -MAX_SQLITE_INTEGER - 1 <= article_id <= MAX_SQLITE_INTEGER


def _clean(fields):
    missing = missing_required(fields)
    if missing:
        raise ValueError(f"Missing required fields: {', '.join(missing)}")

    values = {name: fields[name] for name in REQUIRED_FIELDS}
    for name in OPTIONAL_FIELDS:
        values[name] = fields.get(name) or ''
    return values


class ArticleDatabase:
    """Single-table store for published articles"""

    @staticmethod
    def init_table():
        with Database.connect(get_db_config()) as conn:
            conn.execute(f'''
                CREATE TABLE IF NOT EXISTS {Config.ARTICLES_TABLE} (
                    id INTEGER PRIMARY KEY AUTOINCREMENT,
                    title TEXT NOT NULL,
                    subtitle TEXT NOT NULL DEFAULT '',
                    body TEXT NOT NULL,
                    image_url TEXT NOT NULL DEFAULT '',
                    video_url TEXT NOT NULL DEFAULT '',
                    published_at TIMESTAMP NOT NULL,
                    author TEXT NOT NULL
                )
            ''')
            conn.execute(f'''
                CREATE INDEX IF NOT EXISTS idx_articles_published_at
                ON {Config.ARTICLES_TABLE}(published_at DESC)
            ''')

    @staticmethod
    def create(fields):
        """Insert a new article and return its id.

        ``published_at`` is always the current UTC time. Raises ValueError
        (without writing anything) if title, body or author is blank.
        """
        values = _clean(fields)
        published_at = utc_now().strftime('%Y-%m-%d %H:%M:%S')

        with Database.connect(get_db_config()) as conn:
            cursor = conn.execute(f'''
                INSERT INTO {Config.ARTICLES_TABLE}
                    (title, subtitle, body, image_url, video_url, author, published_at)
                VALUES (?, ?, ?, ?, ?, ?, ?)
            ''', (values['title'], values['subtitle'], values['body'],
                  values['image_url'], values['video_url'], values['author'],
                  published_at))
            article_id = cursor.lastrowid

        logger.info('articles', f"Created article {article_id}", {'title': values['title']})
        return article_id

    @staticmethod
    def list_latest(limit=Config.FEED_DEFAULT_LIMIT):
        """Newest first; ``limit=None`` returns every article"""
        sql = f'''
            SELECT {COLUMNS} FROM {Config.ARTICLES_TABLE}
            ORDER BY published_at DESC, id DESC
        '''
        params = ()
        if limit is not None:
            sql += ' LIMIT ?'
            params = (min(max(int(limit), 0), MAX_SQLITE_INTEGER),)

        with Database.connect(get_db_config()) as conn:
            rows = conn.execute(sql, params).fetchall()

        logger.debug('articles', f"Listed {len(rows)} articles", {'limit': limit})
        return [dict(row) for row in rows]

    @staticmethod
    def get_by_id(article_id):
        """Return the article as a dict, or None if there is no such id"""
        if not storable_id(article_id):
            logger.debug('articles', f"Article id {article_id} out of range")
            return None

        with Database.connect(get_db_config()) as conn:
            row = conn.execute(
                f'SELECT {COLUMNS} FROM {Config.ARTICLES_TABLE} WHERE id = ?',
                (article_id,)
            ).fetchone()

        if row is None:
            logger.debug('articles', f"Article {article_id} not found")
        return Database.row_to_dict(row)

    @staticmethod
    def update(article_id, fields):
        """Overwrite every mutable field; returns the number of rows changed.

        ``id`` and ``published_at`` are never modified. Zero means the id
        does not exist and nothing was written.
        """
        values = _clean(fields)
        if not storable_id(article_id):
            return 0

        with Database.connect(get_db_config()) as conn:
            cursor = conn.execute(f'''
                UPDATE {Config.ARTICLES_TABLE}
                SET title = ?, subtitle = ?, body = ?,
                    image_url = ?, video_url = ?, author = ?
                WHERE id = ?
            ''', (values['title'], values['subtitle'], values['body'],
                  values['image_url'], values['video_url'], values['author'],
                  article_id))
            changes = cursor.rowcount

        logger.info('articles', f"Updated article {article_id}", {'changes': changes})
        return changes

    @staticmethod
    def delete(article_id):
        """Hard delete; returns the number of rows removed (0 is fine)"""
        if not storable_id(article_id):
            return 0

        with Database.connect(get_db_config()) as conn:
            cursor = conn.execute(
                f'DELETE FROM {Config.ARTICLES_TABLE} WHERE id = ?', (article_id,)
            )
            changes = cursor.rowcount

        logger.info('articles', f"Deleted article {article_id}", {'changes': changes})
        return changes

    @staticmethod
    def count():
        with Database.connect(get_db_config()) as conn:
            return conn.execute(f'SELECT COUNT(*) FROM {Config.ARTICLES_TABLE}').fetchone()[0]
