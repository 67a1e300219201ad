import os
import sqlite3
from contextlib import contextmanager


class Database:

    @staticmethod
    @contextmanager
    def connect(path):
        """
        Open a connection for a single operation.

        Rows come back as sqlite3.Row. The block is committed when it exits
        cleanly, rolled back otherwise, and the connection is always closed.
        """
        db_dir = os.path.dirname(path)
        if db_dir:
            os.makedirs(db_dir, exist_ok=True)

        conn = sqlite3.connect(path)
        conn.row_factory = sqlite3.Row
        try:
            yield conn
            conn.commit()
        except Exception:
            conn.rollback()
            raise
        finally:
            conn.close()

    @staticmethod
    def row_to_dict(row):
        return dict(row) if row is not None else None
