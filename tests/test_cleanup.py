"""dora-cleanup tests: draft retention purge with the database mocked out."""

from contextlib import asynccontextmanager
from datetime import datetime, timedelta, timezone
from unittest.mock import AsyncMock, patch

import pytest

from dora_assessment.models.session import Draft
from dora_server.cleanup import run_cleanup

from helpers.fakes import MockDraftRepository


@asynccontextmanager
async def _fake_scope():
    yield AsyncMock()


async def _repo_with_drafts(*ages_in_days: int) -> MockDraftRepository:
    repo = MockDraftRepository()
    now = datetime.now(timezone.utc)
    for i, age in enumerate(ages_in_days):
        draft = Draft(
            provider_name="CloudCo",
            financial_entity_name="BancoX",
            user_name=f"user{i}",
            answers={},
            observations={},
            last_question_index=0,
            date=now.isoformat(),
        )
        row = await repo.save_draft(None, user_id="u", catalog_version="v1", draft=draft)
        row.created_at = now - timedelta(days=age)
    return repo


class TestRunCleanup:

    @pytest.mark.asyncio
    async def test_purges_drafts_older_than_threshold(self):
        repo = await _repo_with_drafts(1, 40, 200)
        dispose = AsyncMock()
        with patch("dora_db.engine.session_scope", _fake_scope), \
                patch("dora_db.engine.dispose_engine", dispose):
            affected = await run_cleanup(days=30, repo=repo)

        assert affected == 2
        assert [r.user_name for r in repo.rows] == ["user0"]
        dispose.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_zero_days_purges_everything(self):
        repo = await _repo_with_drafts(0, 5)
        with patch("dora_db.engine.session_scope", _fake_scope), \
                patch("dora_db.engine.dispose_engine", AsyncMock()):
            assert await run_cleanup(days=0, repo=repo) == 2
        assert repo.rows == []

    @pytest.mark.asyncio
    async def test_default_threshold_comes_from_environment(self, monkeypatch):
        monkeypatch.setenv("DRAFT_RETENTION_DAYS", "10")
        repo = await _repo_with_drafts(5, 15)
        with patch("dora_db.engine.session_scope", _fake_scope), \
                patch("dora_db.engine.dispose_engine", AsyncMock()):
            assert await run_cleanup(repo=repo) == 1
        assert [r.user_name for r in repo.rows] == ["user0"]
