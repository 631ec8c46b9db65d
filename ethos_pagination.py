"""
Offset pagination over the Ethos API.

Two traversals, picked per endpoint by the verb its listing accepts:

    paginate_query: GET, ``limit``/``offset`` sent as query parameters
    paginate_body:  POST, ``limit``/``offset`` sent in the JSON body

Both are generators: pages are fetched only as items are consumed, each
item is parsed and yielded once, and a new call always starts at offset 0.
A page shorter than ``limit`` (or empty) ends the traversal; a full page
means another request is made.
"""

from itertools import islice
from typing import Any, Callable, Dict, Iterable, Iterator, List, Optional, TypeVar

from ethos_config import DEFAULT_PAGE_SIZE

T = TypeVar("T")

ENVELOPE_KEYS = ("data", "values", "results")


def extract_items(response: Any) -> List[Any]:
    """
    Pull the item list out of a response.

    Accepts a bare list or an envelope carrying the list under ``data``,
    ``values`` or ``results`` (first list found wins). Anything else is an
    empty page.
    """
    if isinstance(response, list):
        return response
    if isinstance(response, dict):
        for key in ENVELOPE_KEYS:
            items = response.get(key)
            if isinstance(items, list):
                return items
    return []


def paginate_query(
    http,
    path: str,
    parse: Callable[[Dict[str, Any]], T],
    params: Optional[Dict[str, Any]] = None,
    limit: int = DEFAULT_PAGE_SIZE,
) -> Iterator[T]:
    """
    Iterate over a GET listing endpoint.

    Args:
        http: Transport exposing ``get(path, params)``
        path: Listing path
        parse: Turns one raw record into a typed value
        params: Filters merged with ``limit`` and ``offset``
        limit: Page size, also the short-page threshold

    Yields:
        Parsed items, in server order
    """
    offset = 0
    while True:
        response = http.get(path, {**(params or {}), "limit": limit, "offset": offset})
        items = extract_items(response)
        if not items:
            return

        for item in items:
            yield parse(item)

        if len(items) < limit:
            return
        offset += limit


def paginate_body(
    http,
    path: str,
    parse: Callable[[Dict[str, Any]], T],
    body: Optional[Dict[str, Any]] = None,
    limit: int = DEFAULT_PAGE_SIZE,
) -> Iterator[T]:
    """
    Iterate over a POST listing endpoint.

    The response is ``{"values": [...], "total": n}``; only the length of
    ``values`` decides whether another page is requested.
    """
    offset = 0
    while True:
        response = http.post(path, {**(body or {}), "limit": limit, "offset": offset})
        items = response.get("values") if isinstance(response, dict) else None
        if not isinstance(items, list) or not items:
            return

        for item in items:
            yield parse(item)

        if len(items) < limit:
            return
        offset += limit


def take(iterable: Iterable[T], n: int) -> List[T]:
    """First ``n`` items; no page past the one holding item ``n`` is fetched."""
    return list(islice(iterable, n))


def first(iterable: Iterable[T]) -> Optional[T]:
    """First item or None."""
    return next(iter(iterable), None)
