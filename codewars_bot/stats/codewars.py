"""
Module: codewars_bot/stats/codewars.py

Client for the public Codewars API, reduced to the user profile numbers the
reports need.
"""
from dataclasses import dataclass
from typing import Optional
from urllib.parse import quote

import httpx

from codewars_bot.utils import log_message

BASE_URL = "https://www.codewars.com/api/v1"


class CodewarsError(Exception):
    """Raised when a Codewars profile cannot be fetched"""
    pass


@dataclass(frozen=True)
class UserStats:
    """
    Statistics of one Codewars user.

    Attributes:
        username (str): Codewars username.
        honor (int): Honor points.
        score (int): Overall rank score.
        rank_name (str): Overall rank, e.g. "4 kyu".
        completed (int): Number of completed kata.
        leaderboard_position (int or None): Position on the honor leaderboard.
    """
    username: str
    honor: int
    score: int
    rank_name: str
    completed: int
    leaderboard_position: Optional[int] = None

    @classmethod
    def from_api(cls, data):
        overall = data.get("ranks", {}).get("overall", {})
        challenges = data.get("codeChallenges", {})
        return cls(
            username=data["username"],
            honor=int(data.get("honor") or 0),
            score=int(overall.get("score") or 0),
            rank_name=overall.get("name") or "unranked",
            completed=int(challenges.get("totalCompleted") or 0),
            leaderboard_position=data.get("leaderboardPosition"),
        )


class CodewarsClient:
    """Client for Codewars API interactions"""

    def __init__(self, base_url=BASE_URL, timeout=10.0, transport=None):
        self.base_url = base_url.rstrip("/")
        self._client = httpx.AsyncClient(timeout=timeout, transport=transport)

    async def fetch_user(self, username):
        """
        Fetch the profile of `username`.

        Raises:
            CodewarsError: on transport errors, non-2xx answers or unexpected payloads.
        """
        url = f"{self.base_url}/users/{quote(username, safe='')}"
        try:
            response = await self._client.get(url)
            response.raise_for_status()
            return UserStats.from_api(response.json())
        except httpx.HTTPStatusError as e:
            log_message(f"Codewars API error for {username}: {e.response.status_code}", "warning")
            raise CodewarsError(f"Codewars API error: {e.response.status_code}") from e
        except httpx.HTTPError as e:
            log_message(f"Error requesting Codewars profile of {username}: {e}", "warning")
            raise CodewarsError(f"Request failed: {e}") from e
        except (AttributeError, KeyError, TypeError, ValueError) as e:
            raise CodewarsError(f"Unexpected Codewars payload for {username}: {e}") from e

    async def close(self):
        await self._client.aclose()
