"""Tests for the access-log middleware."""

import logging

import pytest

from notes_api.middleware.logging import level_for_status


@pytest.mark.parametrize(
    "status, level",
    [(200, logging.INFO), (204, logging.INFO), (400, logging.WARNING), (404, logging.WARNING), (500, logging.ERROR)],
)
def test_level_for_status(status, level):
    assert level_for_status(status) == level


@pytest.mark.asyncio
async def test_access_line_logged(test_client, caplog):
    with caplog.at_level(logging.INFO, logger="notes_api.access"):
        await test_client.get("/api/notes/missing")

    records = [r for r in caplog.records if r.name == "notes_api.access"]
    assert len(records) == 1
    assert records[0].levelno == logging.WARNING
    assert records[0].path == "/api/notes/missing"
    assert records[0].status == 404


@pytest.mark.asyncio
async def test_health_checks_not_logged(test_client, caplog):
    with caplog.at_level(logging.INFO, logger="notes_api.access"):
        await test_client.get("/api/healthchecker")

    assert not [r for r in caplog.records if r.name == "notes_api.access"]
