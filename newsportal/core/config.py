import os
from dotenv import load_dotenv

load_dotenv(override=True)

class Config:
    """
    Base configuration for the news portal.
    Every value can be supplied through the environment (or a .env file);
    NewsPortal.init_app() only fills in keys the host app has not set.
    """
    # Flask settings
    SECRET_KEY = os.getenv('NEWSPORTAL_SECRET_KEY') or os.getenv('FLASK_SECRET_KEY')
    SESSION_LIFETIME_HOURS = int(os.getenv('SESSION_LIFETIME_HOURS', '24'))

    # Get DB_DIR from environment, or use a default if not set
    DB_DIR = os.getenv('DB_DIR', os.path.join(os.getcwd(), 'databases'))

    # Database paths - use environment variables or fallback to DB_DIR
    NEWS_DB = os.getenv('NEWS_DB', os.path.join(DB_DIR, "news.db"))
    USER_DB = os.getenv('USER_DB', os.path.join(DB_DIR, "users.db"))

    # Table names
    ARTICLES_TABLE = "articles"
    USERS_TABLE = "users"

    # Uploads are written here and served back under UPLOAD_URL_PREFIX
    UPLOAD_FOLDER = os.getenv('UPLOAD_FOLDER', os.path.join(os.getcwd(), 'public', 'uploads'))
    UPLOAD_URL_PREFIX = os.getenv('UPLOAD_URL_PREFIX', '/uploads')
    UPLOAD_FIELD_NAME = 'image'
    MAX_IMAGE_SIZE = int(os.getenv('MAX_IMAGE_SIZE', str(5 * 1024 * 1024)))

    # Listing sizes
    FEED_DEFAULT_LIMIT = 6
    HOME_LIMIT = int(os.getenv('HOME_LIMIT', '20'))
    ARTICLES_PAGE_LIMIT = int(os.getenv('ARTICLES_PAGE_LIMIT', '20'))
    API_DEFAULT_LIMIT = int(os.getenv('API_DEFAULT_LIMIT', '5'))

    # First-run admin account
    ADMIN_USERNAME = os.getenv('ADMIN_USERNAME', 'admin')
    ADMIN_PASSWORD = os.getenv('ADMIN_PASSWORD')

    LOG_LEVEL = os.getenv('LOG_LEVEL', 'INFO')
    CORS_ORIGINS = os.getenv('CORS_ORIGINS', '*')

    # Port for local server
    port = int(os.getenv('PORT', '5000'))

    @classmethod
    def as_dict(cls):
        """Upper-case settings, ready to be merged into app.config"""
        return {key: getattr(cls, key) for key in dir(cls) if key.isupper()}
