"""
Module: codewars_bot/database.py

Handles SQLite database connectivity, schema initialization, and query execution
for the roster, the schedule settings and the statistics snapshots.
"""
import sqlite3
from codewars_bot.utils import log_message

class Database:
    """
    Database wrapper for SQLite with automatic connection handling and schema setup.
    """
    def __init__(self, path='codewars-bot.db'):
        """
        Initialize the Database instance and establish the first connection.

        Args:
            path (str): Location of the SQLite file, or ':memory:'.
        """
        self.path = path
        self.conn = None
        self.cursor = None
        self.connect()

    def connect(self):
        """
        Establish a connection to the SQLite database and initialize the schema
        if necessary.

        Reconnects if there was a previous connection.
        """
        try:
            if self.conn:
                try:
                    self.conn.close()
                except Exception as e:
                    log_message(f"Error closing existing DB connection: {e}", "warning")

            self.conn = sqlite3.connect(self.path, check_same_thread=False)
            self.cursor = self.conn.cursor()
            self._initialize_db()

        except sqlite3.Error as e:
            log_message(f"Database connection error: {e}", "error")
            raise

    def _initialize_db(self):
        """
        Create the roster, settings and snapshot tables if they do not exist.
        """
        self.cursor.execute('''
            CREATE TABLE IF NOT EXISTS roster (
                username TEXT PRIMARY KEY,
                added_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
            )
        ''')
        self.cursor.execute('''
            CREATE TABLE IF NOT EXISTS settings (
                key TEXT PRIMARY KEY,
                value TEXT
            )
        ''')
        self.cursor.execute('''
            CREATE TABLE IF NOT EXISTS snapshots (
                username TEXT NOT NULL,
                day TEXT NOT NULL,
                honor INTEGER NOT NULL,
                score INTEGER NOT NULL,
                rank_name TEXT NOT NULL,
                completed INTEGER NOT NULL,
                leaderboard_position INTEGER,
                PRIMARY KEY(username, day)
            )
        ''')
        self.cursor.execute('CREATE INDEX IF NOT EXISTS idx_snapshots_day ON snapshots (day)')
        self.conn.commit()

    def ensure_connection(self):
        """
        Verify that the current connection is alive by executing a simple query.
        If it fails, reconnect and reinitialize the schema.
        """
        try:
            self.cursor.execute('SELECT 1')
        except (sqlite3.ProgrammingError, sqlite3.InterfaceError, sqlite3.OperationalError) as e:
            log_message(f"Lost DB connection, reconnecting: {e}", "warning")
            self.connect()

    def execute(self, query, params=()):
        """
        Execute a modifying SQL query (INSERT/UPDATE/DELETE) with parameters,
        ensuring the connection is alive and committing after success.

        Returns the SQLite cursor for further inspection.
        """
        try:
            self.ensure_connection()
            result = self.cursor.execute(query, params)
            self.conn.commit()
            return result
        except sqlite3.Error as e:
            log_message(f"Error executing query: {e}\nQuery: {query}\nParams: {params}", "error")
            raise

    def fetchall(self, query, params=()):
        """
        Execute a SELECT query with parameters and return all fetched rows.

        Ensures the connection is alive before querying.
        """
        try:
            self.ensure_connection()
            return self.cursor.execute(query, params).fetchall()
        except sqlite3.Error as e:
            log_message(f"Error fetching data: {e}\nQuery: {query}\nParams: {params}", "error")
            raise

    def get_setting(self, key, default=None):
        rows = self.fetchall('SELECT value FROM settings WHERE key = ?', (key,))
        return rows[0][0] if rows else default

    def set_setting(self, key, value):
        self.execute(
            'INSERT INTO settings (key, value) VALUES (?, ?) '
            'ON CONFLICT(key) DO UPDATE SET value = excluded.value',
            (key, value)
        )

    def close(self):
        try:
            self.conn.close()
        except Exception as e:
            log_message(f"Failed to close database: {e}", "error")
