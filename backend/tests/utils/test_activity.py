import logging
from typing import Any, List

import pytest
from app.utils import activity


class BrokenSessionFactory:
    def __call__(self) -> "BrokenSessionFactory":
        return self

    async def __aenter__(self) -> "BrokenSessionFactory":
        raise ConnectionError("database unavailable")

    async def __aexit__(self, exc_type: object, exc: object, tb: object) -> bool:  # pragma: no cover
        return False


@pytest.mark.asyncio
async def test_record_activity_swallows_store_failure(
    monkeypatch: pytest.MonkeyPatch, caplog: pytest.LogCaptureFixture
) -> None:
    emitted: List[dict[str, Any]] = []
    monkeypatch.setattr(activity, "emit_audit_log", lambda **kwargs: emitted.append(kwargs))
    monkeypatch.setattr(activity, "async_session", BrokenSessionFactory())

    with caplog.at_level(logging.ERROR, logger=activity.logger.name):
        await activity.record_activity("create", "reservation", 1, 2, {"guests": 3})

    assert emitted and emitted[0]["metadata"] == {"guests": 3}
    assert "activity log failed" in caplog.text


@pytest.mark.asyncio
async def test_record_activity_swallows_audit_log_failure(
    monkeypatch: pytest.MonkeyPatch, caplog: pytest.LogCaptureFixture
) -> None:
    def failing_emit(**kwargs: Any) -> None:
        raise RuntimeError("failed to emit audit log")

    monkeypatch.setattr(activity, "emit_audit_log", failing_emit)
    monkeypatch.setattr(activity, "async_session", BrokenSessionFactory())

    with caplog.at_level(logging.ERROR, logger=activity.logger.name):
        await activity.record_activity("login", "user", 1, 1)

    assert "audit log failed" in caplog.text
