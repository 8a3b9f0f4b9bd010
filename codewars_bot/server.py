"""
Module: codewars_bot/server.py

FastAPI application receiving Slack slash commands and Events API callbacks.

Every endpoint verifies the Slack signature over the raw body before anything
in the body is parsed.
"""
import json
import re
from contextlib import asynccontextmanager
from urllib.parse import parse_qs

from fastapi import FastAPI, Request, BackgroundTasks
from fastapi.responses import JSONResponse, PlainTextResponse

from codewars_bot.auth import AuthError, verify
from codewars_bot.commands import Stats, ParseError, parse, interpret, respond
from codewars_bot.commands.help import usage_for
from codewars_bot.stats.slack import SlackError
from codewars_bot.utils import log_message

SEC_HEADERS = {
    "referrer-policy": "same-origin",
    "strict-transport-security": "max-age=63072000; includeSubDomains; preload",
    "x-content-type-options": "nosniff",
    "x-frame-options": "DENY",
    "x-xss-protection": "1; mode=block",
}

MENTION = re.compile(r'^\s*<@[A-Z0-9]+(?:\|[^>]*)?>\s*')


def ephemeral(text):
    return {"response_type": "ephemeral", "text": text}


async def authenticate(request, context):
    """
    Read the raw body and verify its signature.

    Returns the body bytes. Raises AuthError when verification fails.
    """
    body = await request.body()
    verify(
        request.headers.get("x-slack-signature"),
        request.headers.get("x-slack-request-timestamp"),
        body,
        context.signing_secret,
        tolerance=context.signature_tolerance,
    )
    return body


def rejected(request, error):
    log_message(f"Rejected request to {request.url.path}: {type(error).__name__}: {error}", "warning")
    return PlainTextResponse("invalid request signature", status_code=401)


async def run_stats(command, context):
    """
    Background job for `stats` from a slash command.
    """
    try:
        reply = await interpret(command, context)
        log_message(reply, "info")
    except Exception as e:
        log_message(f"Error running stats command: {e}", "error")


async def reply_to_mention(text, user, context):
    """
    Background job answering an app mention through the webhook. A `stats`
    mention only posts the report itself.
    """
    command = parse(text)
    if isinstance(command, Stats):
        await run_stats(command, context)
        return
    try:
        reply = await respond(text, context)
        if user:
            reply = f"<@{user}> {reply}"
        await context.reporter.poster.post(reply)
    except SlackError as e:
        log_message(f"Could not answer mention: {e}", "error")
    except Exception as e:
        log_message(f"Error handling mention {text!r}: {e}", "error")


def create_app(context):
    """
    Create the FastAPI app for the given BotContext. The lifespan starts the
    digest scheduler and shuts the context down on exit.
    """
    @asynccontextmanager
    async def lifespan(app):
        context.start()
        log_message("Codewars bot server started", "info")
        yield
        await context.stop()

    app = FastAPI(
        title="Codewars Bot",
        description="Slack bot reporting Codewars statistics",
        version="0.2.0",
        lifespan=lifespan,
    )

    @app.middleware("http")
    async def security_headers(request: Request, call_next):
        response = await call_next(request)
        for key, value in SEC_HEADERS.items():
            response.headers[key] = value
        return response

    @app.post("/slack/commands")
    async def slash_command(request: Request, background_tasks: BackgroundTasks):
        """Endpoint for Slack slash commands (form encoded)."""
        try:
            body = await authenticate(request, context)
        except AuthError as e:
            return rejected(request, e)

        form = parse_qs(body.decode("utf-8", errors="replace"), keep_blank_values=True)
        text = form.get("text", [""])[0]
        user = form.get("user_name", ["unknown"])[0]
        log_message(f"Slash command from {user}: {text!r}", "info")

        command = parse(text)
        if isinstance(command, ParseError):
            return ephemeral(usage_for(command.raw))
        if isinstance(command, Stats):
            background_tasks.add_task(run_stats, command, context)
            return ephemeral("⌛ Gathering statistics, the report will be posted to the channel...")
        return ephemeral(await interpret(command, context))

    @app.post("/slack/events")
    async def slack_events(request: Request, background_tasks: BackgroundTasks):
        """Endpoint for the Slack Events API (URL verification and app mentions)."""
        try:
            body = await authenticate(request, context)
        except AuthError as e:
            return rejected(request, e)

        try:
            payload = json.loads(body)
        except ValueError:
            log_message("Event payload is not valid JSON", "warning")
            return PlainTextResponse("invalid payload", status_code=400)

        callback = payload.get("type")
        if callback == "url_verification":
            log_message("Received URL verification request", "debug")
            return PlainTextResponse(payload.get("challenge", ""))
        if callback != "event_callback":
            log_message(f"Received unknown callback request ({callback})", "info")
            return PlainTextResponse("")

        event = payload.get("event") or {}
        if event.get("type") != "app_mention":
            log_message(f"Received unknown event ({event.get('type')})", "info")
            return PlainTextResponse("")

        text = MENTION.sub("", event.get("text", ""), count=1)
        background_tasks.add_task(reply_to_mention, text, event.get("user"), context)
        return PlainTextResponse("")

    @app.get("/health")
    async def health_check():
        config = context.schedule.current
        return JSONResponse({
            "status": "healthy",
            "tracked_users": len(context.roster),
            "schedule": config.describe(),
            "notify": config.notify,
        })

    return app
