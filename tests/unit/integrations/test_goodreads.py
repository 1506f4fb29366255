"""
Unit tests for the Goodreads pipeline.
"""
from datetime import datetime, timezone
from unittest.mock import patch

import pytest
from sqlmodel import select

from dashboard.integrations import goodreads
from dashboard.integrations.config_provider import LoadedConfig
from dashboard.integrations.pipeline import run_pipeline
from dashboard.models.enums import PipelineStatus
from dashboard.models.snapshot import GoodreadsSnapshot
from dashboard.schemas.app_config import AppConfigData

from .helpers import FakeHttp

REVIEW_LIST_URL = f"{goodreads.GOODREADS_API_URL}/review/list/4242.xml"


def _review(title, read_at="", pages="300", rating="4"):
    return f"""
    <review>
      <rating>{rating}</rating>
      <read_at>{read_at}</read_at>
      <book>
        <title>{title}</title>
        <image_url>https://images.gr-assets.com/{title}.jpg</image_url>
        <link>https://www.goodreads.com/book/show/{title}</link>
        <num_pages>{pages}</num_pages>
        <authors><author><name>Author of {title}</name></author></authors>
      </book>
    </review>"""


def _review_list(reviews, total=None):
    total = len(reviews) if total is None else total
    return (
        '<?xml version="1.0" encoding="UTF-8"?>\n<GoodreadsResponse>'
        f'<reviews start="1" end="{len(reviews)}" total="{total}">'
        + "".join(reviews)
        + "</reviews></GoodreadsResponse>"
    )


READ_SHELF = _review_list(
    [
        _review("Dune", read_at="Tue Mar 12 00:00:00 -0700 2024", pages="412"),
        _review("Emma", read_at="Sat Jan 06 10:00:00 +0000 2024", pages=""),
        _review("Ubik", read_at="Fri Dec 01 08:00:00 +0000 2023", pages="202"),
    ],
    total=87,
)
CURRENTLY_READING = _review_list([_review("Solaris")])


def _shelf_router(read=READ_SHELF, current=CURRENTLY_READING):
    def _route(kwargs):
        shelf = kwargs["params"]["shelf"]
        return 200, read if shelf == "read" else current
    return _route


def _config(settings=None):
    settings = settings if settings is not None else {"key": "gr-key", "id": "4242"}
    return LoadedConfig(user_id=None, data=AppConfigData.model_validate({"goodreads": settings}))


@pytest.fixture
def fixed_year():
    with patch(
        "dashboard.integrations.goodreads.utc_now",
        return_value=datetime(2024, 6, 1, tzinfo=timezone.utc),
    ):
        yield


class TestGoodreadsPipeline:

    @pytest.mark.asyncio
    async def test_successful_run(self, session, fixed_year):
        fake = FakeHttp({REVIEW_LIST_URL: _shelf_router()})

        with patch("dashboard.integrations.fetcher.get_http_client", fake.patch_target()):
            result = await run_pipeline(session, goodreads.PIPELINE, config=_config())

        assert result.status == PipelineStatus.SUCCEEDED, result.error_message
        snapshot = session.get(GoodreadsSnapshot, result.snapshot_id)
        assert snapshot.book_count == 87
        assert snapshot.books_this_year == 2
        assert snapshot.pages_this_year == 412
        assert [b["title"] for b in snapshot.recent_books] == ["Dune", "Emma", "Ubik"]
        assert snapshot.recent_books[0]["author"] == "Author of Dune"
        assert snapshot.currently_reading[0]["title"] == "Solaris"

    @pytest.mark.asyncio
    async def test_request_parameters(self, session, fixed_year):
        fake = FakeHttp({REVIEW_LIST_URL: _shelf_router()})

        with patch("dashboard.integrations.fetcher.get_http_client", fake.patch_target()):
            await run_pipeline(session, goodreads.PIPELINE, config=_config())

        read_params, current_params = (call["params"] for call in fake.calls)
        assert read_params["shelf"] == "read"
        assert read_params["per_page"] == goodreads.READ_PAGE_SIZE
        assert read_params["key"] == "gr-key"
        assert read_params["v"] == 2
        assert current_params["shelf"] == "currently-reading"

    @pytest.mark.asyncio
    async def test_missing_user_id(self, session):
        fake = FakeHttp({})

        with patch("dashboard.integrations.fetcher.get_http_client", fake.patch_target()):
            result = await run_pipeline(session, goodreads.PIPELINE, config=_config({"key": "gr-key"}))

        assert result.error_message == "Missing Goodreads user id"
        assert fake.calls == []

    @pytest.mark.asyncio
    async def test_unexpected_document(self, session, fixed_year):
        fake = FakeHttp({REVIEW_LIST_URL: "<GoodreadsResponse><error>denied</error></GoodreadsResponse>"})

        with patch("dashboard.integrations.fetcher.get_http_client", fake.patch_target()):
            result = await run_pipeline(session, goodreads.PIPELINE, config=_config())

        assert result.error_type == "PayloadShapeError"
        assert result.error_message == "Could not parse Goodreads review data"
        assert session.exec(select(GoodreadsSnapshot)).all() == []

    @pytest.mark.asyncio
    async def test_second_request_failure_discards_first(self, session, fixed_year):
        def _route(kwargs):
            if kwargs["params"]["shelf"] == "read":
                return 200, READ_SHELF
            return 503, "unavailable"

        fake = FakeHttp({REVIEW_LIST_URL: _route})

        with patch("dashboard.integrations.fetcher.get_http_client", fake.patch_target()):
            result = await run_pipeline(session, goodreads.PIPELINE, config=_config())

        assert result.error_type == "RemoteCallError"
        assert len(fake.calls) == 2
        assert session.exec(select(GoodreadsSnapshot)).all() == []
