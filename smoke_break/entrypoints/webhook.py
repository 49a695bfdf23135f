"""Webhook entrypoint for SmokeBreak.

Launches an aiohttp web server that hands Telegram webhooks to the aiogram
dispatcher configured in ``bot_main``.
"""
from __future__ import annotations

import os
import logging

from aiohttp import web
from aiogram.webhook.aiohttp_server import SimpleRequestHandler, setup_application

from smoke_break.entrypoints import bot_main  # re-use configured dispatcher & scheduler

logger = logging.getLogger(__name__)

BASE_URL = os.getenv("BASE_URL")  # e.g. https://my-bot.onrender.com
if not BASE_URL:
    raise RuntimeError("BASE_URL env variable not set")

WEBHOOK_SECRET = os.getenv("WEBHOOK_SECRET", "smokebreaksecret")

bot = bot_main.bot
dp = bot_main.dp

app = web.Application()


async def on_startup(app: web.Application):
    bot_main.load_state()
    await bot.set_webhook(f"{BASE_URL}/webhook", secret_token=WEBHOOK_SECRET)
    bot_main.start_background_jobs()
    logger.info("Webhook set and scheduler started")


async def on_cleanup(app: web.Application):
    bot_main.reminders.stop()
    if bot_main.scheduler.running:
        bot_main.scheduler.shutdown(wait=False)
    await bot.delete_webhook()


# Register aiogram request handler
SimpleRequestHandler(dispatcher=dp, bot=bot, secret_token=WEBHOOK_SECRET).register(app, path="/webhook")

# Apply aiogram middlewares to aiohttp app
setup_application(app, dp, bot=bot)

app.on_startup.append(on_startup)
app.on_cleanup.append(on_cleanup)

if __name__ == "__main__":
    port = int(os.getenv("PORT", 8080))
    web.run_app(app, host="0.0.0.0", port=port)
