"""Tests for the Telegram callback handlers."""

from __future__ import annotations

import asyncio
import importlib

import pytest

from smoke_break.core.entities.session import SessionPhase
from smoke_break.core.services.session_engine import SessionEngine


class RecordingCallback:
    def __init__(self) -> None:
        self.answers: list[str | None] = []

    async def answer(self, text: str | None = None, **kwargs) -> None:
        self.answers.append(text)


@pytest.fixture
def bot_main(monkeypatch, tmp_path):
    from smoke_break.dataproviders import db

    monkeypatch.setenv("BOT_TOKEN", "123456:TEST-token")
    monkeypatch.setenv("OWNER_CHAT_ID", "42")
    engine = db.make_engine(f"sqlite:///{tmp_path / 'bot.db'}")
    monkeypatch.setattr(db, "engine", engine)
    monkeypatch.setattr(db, "SessionLocal", db.make_session_factory(engine))
    yield importlib.import_module("smoke_break.entrypoints.bot_main")
    engine.dispose()


@pytest.fixture
def session_engine(bot_main, monkeypatch, ledger, item, fake_scheduler, clock, make_advisory) -> SessionEngine:
    engine = SessionEngine(ledger=ledger, advisory=make_advisory(), item=item, scheduler=fake_scheduler, clock=clock)
    monkeypatch.setattr(bot_main, "session_engine", engine)
    return engine


class TestStopHandler:
    def test_stop_while_idle_answers_without_text(self, bot_main, session_engine):
        callback = RecordingCallback()
        asyncio.run(bot_main.handle_stop(callback))
        assert callback.answers == [None]
        assert session_engine.state.phase is SessionPhase.IDLE

    def test_stop_after_completion_answers_without_text(self, bot_main, session_engine):
        session_engine.start()
        session_engine.tick(120_000)
        callback = RecordingCallback()
        asyncio.run(bot_main.handle_stop(callback))
        assert callback.answers == [None]
        assert session_engine.state.phase is SessionPhase.COMPLETED

    def test_stop_active_session_confirms(self, bot_main, session_engine):
        session_engine.start()
        callback = RecordingCallback()
        asyncio.run(bot_main.handle_stop(callback))
        assert callback.answers == ["Put out"]
        assert session_engine.state.phase is SessionPhase.IDLE


class TestStartHandler:
    def test_second_start_answers_without_text(self, bot_main, session_engine):
        first, second = RecordingCallback(), RecordingCallback()
        asyncio.run(bot_main.handle_start(first))
        asyncio.run(bot_main.handle_start(second))
        assert first.answers == ["🔥"]
        assert second.answers == [None]
