"""
Module: codewars_bot/roster.py

Defines RosterStore: the set of tracked Codewars usernames, persisted in the
roster table and mutated one change at a time.
"""
import asyncio

from codewars_bot.utils import log_message


class RosterStore:
    """
    Owns the roster of tracked usernames.

    Usernames are matched case-sensitively. Adding a present name and removing
    an absent one are no-ops. Mutations are serialized through an asyncio.Lock
    and written to the database only when they change the roster.
    """
    def __init__(self, db):
        self.db = db
        self._lock = asyncio.Lock()
        self._users = frozenset()

    def load(self):
        rows = self.db.fetchall('SELECT username FROM roster')
        self._users = frozenset(row[0] for row in rows)
        log_message(f"Loaded {len(self._users)} tracked user(s)", "info")
        return self.list()

    async def add(self, username):
        """
        Start tracking `username`.

        Returns True if the roster changed, False if the user was already tracked.
        """
        async with self._lock:
            if username in self._users:
                return False
            self.db.execute('INSERT OR IGNORE INTO roster (username) VALUES (?)', (username,))
            self._users = self._users | {username}
        log_message(f"Added {username} to the roster", "info")
        return True

    async def remove(self, username):
        """
        Stop tracking `username`.

        Returns True if the roster changed, False if the user was not tracked.
        """
        async with self._lock:
            if username not in self._users:
                return False
            self.db.execute('DELETE FROM roster WHERE username = ?', (username,))
            self._users = self._users - {username}
        log_message(f"Removed {username} from the roster", "info")
        return True

    def list(self):
        """Return the tracked usernames, sorted."""
        return sorted(self._users)

    def __contains__(self, username):
        return username in self._users

    def __len__(self):
        return len(self._users)
