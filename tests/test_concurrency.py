"""A slow workbook import must not hold up other requests."""

import asyncio
import time
import unittest
from unittest.mock import patch

import httpx

from tests.support import XLSX_MEDIA_TYPE, bearer, make_session_factory, workbook_bytes
from tests.test_ingest import DECORATED_SHEET
from tracker.main import create_app
from tracker.services import ingest

SLOW_PARSE_SECONDS = 1.0


class TestUploadRunsOffTheEventLoop(unittest.IsolatedAsyncioTestCase):
    async def test_read_served_while_upload_parses(self) -> None:
        Session = make_session_factory()
        app = create_app(session_factory=Session)
        headers = bearer(Session, "analyst")
        real_read_rows = ingest.read_rows

        def slow_read_rows(content: bytes) -> list[tuple]:
            time.sleep(SLOW_PARSE_SECONDS)
            return real_read_rows(content)

        transport = httpx.ASGITransport(app=app)
        async with httpx.AsyncClient(transport=transport, base_url="http://testserver") as client:
            with patch("tracker.services.ingest.read_rows", side_effect=slow_read_rows):
                upload = asyncio.create_task(
                    client.post(
                        "/api/projects/bulk-upload",
                        files={"file": ("projects.xlsx", workbook_bytes(DECORATED_SHEET), XLSX_MEDIA_TYPE)},
                        headers=headers,
                    )
                )
                await asyncio.sleep(0.1)
                started = time.monotonic()
                read = await client.get("/api/communities")
                waited = time.monotonic() - started
                upload_resp = await upload

        self.assertEqual(read.status_code, 200)
        self.assertLess(waited, SLOW_PARSE_SECONDS / 2)
        self.assertEqual(upload_resp.status_code, 200, upload_resp.text)
        self.assertEqual(upload_resp.json()["inserted"], 3)
