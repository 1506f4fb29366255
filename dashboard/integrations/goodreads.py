"""
Goodreads integration: reading totals, recent reads and books in progress.

Goodreads answers in XML, so these stages use fetch_text() and the XML
helpers in transforms.py.
"""
from dashboard.core.time_utils import utc_now
from dashboard.integrations.config_provider import get_section, require
from dashboard.integrations.fetcher import fetch_text
from dashboard.integrations.pipeline import PipelineContext, PipelineDefinition
from dashboard.integrations.transforms import books_read_in_year, parse_goodreads_reviews, top_n
from dashboard.models.enums import IntegrationName
from dashboard.models.snapshot import GoodreadsSnapshot

GOODREADS_API_URL = "https://www.goodreads.com"
READ_PAGE_SIZE = 200
RECENT_BOOKS_LIMIT = 10
CURRENTLY_READING_LIMIT = 20

NAME = IntegrationName.GOODREADS.value


def _review_list_params(key: str, shelf: str, per_page: int) -> dict:
    return {
        "v": 2,
        "key": key,
        "shelf": shelf,
        "sort": "date_read",
        "order": "d",
        "per_page": per_page,
    }


async def read_settings(context: PipelineContext) -> PipelineContext:
    section = get_section(context.config, IntegrationName.GOODREADS)
    return context.with_data(
        key=require(section.key, "Missing Goodreads key"),
        goodreads_id=require(section.id, "Missing Goodreads user id"),
    )


async def fetch_read_shelf(context: PipelineContext) -> PipelineContext:
    xml_text = await fetch_text(
        f"{GOODREADS_API_URL}/review/list/{context.get('goodreads_id')}.xml",
        integration=NAME,
        params=_review_list_params(context.get("key"), "read", READ_PAGE_SIZE),
    )
    total, books = parse_goodreads_reviews(xml_text)
    this_year = books_read_in_year(books, utc_now().year)
    return context.with_data(
        book_count=total,
        books_this_year=len(this_year),
        pages_this_year=sum(book["pages"] or 0 for book in this_year),
        recent_books=top_n(books, RECENT_BOOKS_LIMIT),
    )


async def fetch_currently_reading(context: PipelineContext) -> PipelineContext:
    xml_text = await fetch_text(
        f"{GOODREADS_API_URL}/review/list/{context.get('goodreads_id')}.xml",
        integration=NAME,
        params=_review_list_params(context.get("key"), "currently-reading", CURRENTLY_READING_LIMIT),
    )
    _, books = parse_goodreads_reviews(xml_text)
    return context.with_data(currently_reading=books)


def build_snapshot(context: PipelineContext) -> GoodreadsSnapshot:
    return GoodreadsSnapshot(
        book_count=context.get("book_count"),
        books_this_year=context.get("books_this_year"),
        pages_this_year=context.get("pages_this_year"),
        recent_books=context.get("recent_books"),
        currently_reading=context.get("currently_reading"),
    )


PIPELINE = PipelineDefinition(
    name=IntegrationName.GOODREADS,
    stages=(read_settings, fetch_read_shelf, fetch_currently_reading),
    build_snapshot=build_snapshot,
)
