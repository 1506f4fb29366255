"""
Pure reshaping helpers used by the integration stages.

Nothing here performs I/O. Functions that read third-party documents raise
PayloadShapeError when the document does not have the expected structure.
"""
import xml.etree.ElementTree as ET
from datetime import datetime
from typing import Any, Callable, Dict, Iterable, List, Optional, Sequence, TypeVar

from dashboard.core.exceptions import PayloadShapeError

T = TypeVar("T")

TOP_ARTIST_LIMIT = 15
TARGET_IMAGE_WIDTH = 320
TOP_RATINGS = frozenset({9, 10})
OPML_ATTRIBUTES = ("title", "text", "type", "xmlUrl", "htmlUrl")
GOODREADS_DATE_FORMAT = "%a %b %d %H:%M:%S %z %Y"


def top_n(items: Sequence[T], n: int = TOP_ARTIST_LIMIT) -> List[T]:
    """First ``n`` items, keeping the given ranking order."""
    if n < 0:
        raise ValueError("n must not be negative")
    return list(items[:n])


def filter_by_rating(
    items: Iterable[T],
    ratings: Iterable[int] = TOP_RATINGS,
    rating_of: Callable[[T], Optional[int]] = lambda item: getattr(item, "rating", None),
) -> List[T]:
    """
    Keep the items whose rating is in ``ratings``, preserving order.

    Example:
        >>> filter_by_rating([5, 9, 10, 9], rating_of=lambda r: r)
        [9, 10, 9]
    """
    wanted = set(ratings)
    return [item for item in items if rating_of(item) in wanted]


def select_image(
    images: Sequence[T],
    target_width: int = TARGET_IMAGE_WIDTH,
    width_of: Callable[[T], Optional[int]] = lambda image: getattr(image, "width", None),
) -> Optional[T]:
    """
    Pick the image whose width equals ``target_width``.

    Falls back to the first candidate when there is no exact match and
    returns None when there are no candidates at all.
    """
    if not images:
        return None
    for image in images:
        if width_of(image) == target_width:
            return image
    return images[0]


# ================================================================================
# OPML
# ================================================================================

def _outline_to_dict(element: ET.Element) -> Dict[str, Any]:
    node: Dict[str, Any] = {
        key: element.attrib[key] for key in OPML_ATTRIBUTES if key in element.attrib
    }
    children = [_outline_to_dict(child) for child in element.findall("outline")]
    if children:
        node["children"] = children
    return node


def opml_to_outline(opml: str) -> List[Dict[str, Any]]:
    """
    Convert an OPML document into a list of outline nodes.

    Each node carries the OPML attributes that are present (``title``,
    ``text``, ``type``, ``xmlUrl``, ``htmlUrl``) and a ``children`` list for
    folders.
    """
    try:
        root = ET.fromstring(opml.strip())
    except ET.ParseError as exc:
        raise PayloadShapeError(f"Could not parse OPML document: {exc}") from exc

    if root.tag != "opml":
        raise PayloadShapeError(f"Expected an <opml> document, got <{root.tag}>")

    body = root.find("body")
    if body is None:
        raise PayloadShapeError("OPML document has no <body>")

    return [_outline_to_dict(outline) for outline in body.findall("outline")]


# ================================================================================
# GOODREADS
# ================================================================================

def _text(element: Optional[ET.Element], path: str) -> Optional[str]:
    if element is None:
        return None
    found = element.find(path)
    if found is None or found.text is None:
        return None
    value = found.text.strip()
    return value or None


def _int(value: Optional[str]) -> Optional[int]:
    try:
        return int(value) if value is not None else None
    except ValueError:
        return None


def parse_goodreads_date(value: Optional[str]) -> Optional[datetime]:
    """Parse Goodreads' ``Tue Mar 12 00:00:00 -0700 2019`` timestamps."""
    if not value:
        return None
    try:
        return datetime.strptime(value, GOODREADS_DATE_FORMAT)
    except ValueError:
        return None


def parse_goodreads_reviews(xml_text: str) -> tuple[int, List[Dict[str, Any]]]:
    """
    Parse a ``review/list`` response.

    Returns:
        tuple: (total reviews on the shelf, simplified books in document order)
    """
    try:
        root = ET.fromstring(xml_text.strip())
    except ET.ParseError as exc:
        raise PayloadShapeError(f"Could not parse Goodreads response: {exc}") from exc

    reviews = root.find("reviews")
    if reviews is None:
        raise PayloadShapeError("Could not parse Goodreads review data")

    total = _int(reviews.get("total"))
    books = []
    for review in reviews.findall("review"):
        book = review.find("book")
        title = _text(book, "title")
        if title is None:
            raise PayloadShapeError("Could not parse Goodreads book data")
        read_at = parse_goodreads_date(_text(review, "read_at"))
        books.append({
            "title": title,
            "author": _text(book, "authors/author/name"),
            "img": _text(book, "image_url"),
            "link": _text(book, "link"),
            "pages": _int(_text(book, "num_pages")),
            "rating": _int(_text(review, "rating")),
            "read_at": read_at.isoformat() if read_at else None,
        })

    return (total if total is not None else len(books)), books


def books_read_in_year(books: Iterable[Dict[str, Any]], year: int) -> List[Dict[str, Any]]:
    """Books whose ``read_at`` falls in ``year``."""
    return [
        book for book in books
        if book.get("read_at") and datetime.fromisoformat(book["read_at"]).year == year
    ]
