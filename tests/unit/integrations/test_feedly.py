"""
Unit tests for the Feedly pipeline.
"""
from unittest.mock import AsyncMock, patch

import pytest
from sqlmodel import select

from dashboard.integrations import feedly
from dashboard.integrations.config_provider import LoadedConfig
from dashboard.integrations.pipeline import run_pipeline
from dashboard.models.enums import PipelineStatus
from dashboard.models.snapshot import FeedlySnapshot
from dashboard.schemas.app_config import AppConfigData

OPML = """<?xml version="1.0" encoding="UTF-8"?>
<opml version="1.0">
  <head><title>Subscriptions</title></head>
  <body>
    <outline text="Tech" title="Tech">
      <outline type="rss" text="Hacker News" title="Hacker News"
               xmlUrl="https://news.ycombinator.com/rss" htmlUrl="https://news.ycombinator.com"/>
    </outline>
    <outline type="rss" text="xkcd" title="xkcd" xmlUrl="https://xkcd.com/rss.xml"/>
  </body>
</opml>
"""


def _config(settings):
    return LoadedConfig(user_id=None, data=AppConfigData.model_validate({"feedly": settings}))


class TestFeedlyPipeline:

    @pytest.mark.asyncio
    async def test_successful_run_stores_outline(self, session):
        client_factory = AsyncMock()

        with patch("dashboard.integrations.fetcher.get_http_client", client_factory):
            result = await run_pipeline(session, feedly.PIPELINE, config=_config({"opml": OPML}))

        assert result.status == PipelineStatus.SUCCEEDED, result.error_message
        client_factory.assert_not_called()
        snapshot = session.get(FeedlySnapshot, result.snapshot_id)
        assert snapshot.feeds[0]["title"] == "Tech"
        assert snapshot.feeds[0]["children"][0]["xmlUrl"] == "https://news.ycombinator.com/rss"
        assert snapshot.feeds[1] == {
            "title": "xkcd",
            "text": "xkcd",
            "type": "rss",
            "xmlUrl": "https://xkcd.com/rss.xml",
        }

    @pytest.mark.asyncio
    async def test_missing_opml(self, session):
        result = await run_pipeline(session, feedly.PIPELINE, config=_config({"opml": "  "}))

        assert result.error_type == "IntegrationConfigError"
        assert result.error_message == "Missing Feedly opml config"
        assert session.exec(select(FeedlySnapshot)).all() == []

    @pytest.mark.asyncio
    async def test_invalid_opml(self, session):
        result = await run_pipeline(session, feedly.PIPELINE, config=_config({"opml": "<opml><body>"}))

        assert result.error_type == "PayloadShapeError"
        assert result.error_message.startswith("Could not parse OPML document")
