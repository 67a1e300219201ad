from flask import current_app, has_app_context

from ...core.config import Config
from ...core.database import Database


def get_db_config():
    """Path of the accounts database"""
    if has_app_context():
        return current_app.config.get('USER_DB', Config.USER_DB)
    return Config.USER_DB


class AccountDatabase:
    @staticmethod
    def init_table():
        with Database.connect(get_db_config()) as conn:
            conn.execute(f"""
                CREATE TABLE IF NOT EXISTS {Config.USERS_TABLE} (
                    id INTEGER PRIMARY KEY AUTOINCREMENT,
                    username TEXT UNIQUE NOT NULL,
                    password_hash TEXT NOT NULL
                )
            """)

    @staticmethod
    def count_accounts():
        """Number of accounts; only the setup route cares"""
        with Database.connect(get_db_config()) as conn:
            return conn.execute(f"SELECT COUNT(*) FROM {Config.USERS_TABLE}").fetchone()[0]

    @staticmethod
    def create_account(username, password_hash):
        """Insert an account. sqlite3.IntegrityError if the username is taken."""
        with Database.connect(get_db_config()) as conn:
            cursor = conn.execute(f"""
                INSERT INTO {Config.USERS_TABLE} (username, password_hash)
                VALUES (?, ?)
            """, (username, password_hash))
            return cursor.lastrowid

    @staticmethod
    def find_by_username(username):
        with Database.connect(get_db_config()) as conn:
            row = conn.execute(f"""
                SELECT id, username, password_hash FROM {Config.USERS_TABLE}
                WHERE username = ?
            """, (username,)).fetchone()
        return Database.row_to_dict(row)
