"""Tests for the Codewars API client and the Slack webhook, using httpx.MockTransport."""
import asyncio
import json

import httpx
import pytest

from codewars_bot.stats.codewars import CodewarsClient, CodewarsError, UserStats
from codewars_bot.stats.slack import SlackError, SlackWebhook

PROFILE = {
    "username": "g964",
    "name": None,
    "honor": 252087,
    "clan": "",
    "leaderboardPosition": 1,
    "skills": [],
    "ranks": {
        "overall": {"rank": -1, "name": "1 kyu", "color": "purple", "score": 1000000},
        "languages": {},
    },
    "codeChallenges": {"totalAuthored": 862, "totalCompleted": 4375},
}

HOOK_URL = "https://hooks.slack.com/services/T000/B000/XXXX"


def run_client(make_client, call):
    async def scenario():
        client = make_client()
        try:
            return await call(client)
        finally:
            await client.close()
    return asyncio.run(scenario())


class TestCodewarsClient:

    def test_fetch_user_parses_profile(self):
        seen = []

        def handler(request):
            seen.append(request.url)
            return httpx.Response(200, json=PROFILE)

        stats = run_client(
            lambda: CodewarsClient(transport=httpx.MockTransport(handler)),
            lambda client: client.fetch_user("g964"),
        )

        assert str(seen[0]) == "https://www.codewars.com/api/v1/users/g964"
        assert stats == UserStats("g964", 252087, 1000000, "1 kyu", 4375, 1)

    def test_username_is_url_escaped(self):
        seen = []

        def handler(request):
            seen.append(request.url.raw_path)
            return httpx.Response(200, json=dict(PROFILE, username="a/b c"))

        run_client(
            lambda: CodewarsClient(transport=httpx.MockTransport(handler)),
            lambda client: client.fetch_user("a/b c"),
        )
        assert seen[0] == b"/api/v1/users/a%2Fb%20c"

    def test_missing_fields_default_to_zero(self):
        transport = httpx.MockTransport(lambda request: httpx.Response(200, json={"username": "newbie"}))
        stats = run_client(
            lambda: CodewarsClient(transport=transport),
            lambda client: client.fetch_user("newbie"),
        )
        assert stats == UserStats("newbie", 0, 0, "unranked", 0, None)

    def test_unknown_user_raises(self):
        transport = httpx.MockTransport(lambda request: httpx.Response(404, json={"success": False}))
        with pytest.raises(CodewarsError, match="404"):
            run_client(
                lambda: CodewarsClient(transport=transport),
                lambda client: client.fetch_user("nobody"),
            )

    def test_network_error_raises(self):
        def handler(request):
            raise httpx.ConnectError("connection refused", request=request)

        with pytest.raises(CodewarsError):
            run_client(
                lambda: CodewarsClient(transport=httpx.MockTransport(handler)),
                lambda client: client.fetch_user("g964"),
            )

    def test_unexpected_payload_raises(self):
        transport = httpx.MockTransport(lambda request: httpx.Response(200, content=b"<html></html>"))
        with pytest.raises(CodewarsError):
            run_client(
                lambda: CodewarsClient(transport=transport),
                lambda client: client.fetch_user("g964"),
            )

    def test_non_object_payload_raises(self):
        transport = httpx.MockTransport(lambda request: httpx.Response(200, json=[PROFILE]))
        with pytest.raises(CodewarsError, match="Unexpected Codewars payload"):
            run_client(
                lambda: CodewarsClient(transport=transport),
                lambda client: client.fetch_user("g964"),
            )


class TestSlackWebhook:

    def test_post_sends_text_as_json(self):
        received = []

        def handler(request):
            received.append((str(request.url), json.loads(request.content)))
            return httpx.Response(200, text="ok")

        run_client(
            lambda: SlackWebhook(HOOK_URL, transport=httpx.MockTransport(handler)),
            lambda hook: hook.post("hello *world*"),
        )
        assert received == [(HOOK_URL, {"text": "hello *world*"})]

    def test_rejected_post_raises(self):
        transport = httpx.MockTransport(lambda request: httpx.Response(404, text="no_service"))
        with pytest.raises(SlackError, match="404"):
            run_client(
                lambda: SlackWebhook(HOOK_URL, transport=transport),
                lambda hook: hook.post("hello"),
            )

    def test_unreachable_webhook_raises(self):
        def handler(request):
            raise httpx.ConnectTimeout("timed out", request=request)

        with pytest.raises(SlackError):
            run_client(
                lambda: SlackWebhook(HOOK_URL, transport=httpx.MockTransport(handler)),
                lambda hook: hook.post("hello"),
            )
