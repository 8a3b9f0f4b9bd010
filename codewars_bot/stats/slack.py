"""
Module: codewars_bot/stats/slack.py

Posts messages to a Slack channel through an incoming webhook.
"""
import httpx

from codewars_bot.utils import log_message


class SlackError(Exception):
    """Raised when a message cannot be delivered to the webhook"""
    pass


class SlackWebhook:
    """
    Sends plain text or Slack mrkdwn messages to one incoming webhook URL.
    Delivery is attempted once; failures are raised to the caller.
    """
    def __init__(self, url, timeout=10.0, transport=None):
        self.url = url
        self._client = httpx.AsyncClient(timeout=timeout, transport=transport)

    async def post(self, text):
        try:
            response = await self._client.post(self.url, json={"text": text})
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            log_message(f"Webhook rejected message: {e.response.status_code} {e.response.text}", "error")
            raise SlackError(f"Webhook returned {e.response.status_code}") from e
        except httpx.HTTPError as e:
            log_message(f"Failed posting to webhook: {e}", "error")
            raise SlackError(f"Failed posting to webhook: {e}") from e
        log_message(f"Posted message to webhook ({len(text)} chars)", "debug")

    async def close(self):
        await self._client.aclose()
