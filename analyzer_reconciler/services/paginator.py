"""Continuation-token pagination."""

from collections.abc import Callable
from typing import Any, TypeVar

T = TypeVar("T")

PageRequest = dict[str, Any]
PageFetcher = Callable[[PageRequest], tuple[list[T], str | None]]


def paginate(
    first_request: PageRequest,
    fetch_page: PageFetcher,
    token_key: str = "next_token",
) -> list[T]:
    """
    Fetch every page of a list call and concatenate the items.

    Each request after the first is the first request with ``token_key`` set
    to the continuation token of the previous response. Stops at the first
    response without a token. Items keep call order; nothing is reordered
    or deduplicated, and the page count is not bounded.

    Args:
        first_request: Request for the first page
        fetch_page: Callable returning ``(items, next_token)`` for a request
        token_key: Request key carrying the continuation token

    Returns:
        Items of all pages in order
    """
    items: list[T] = []
    request = first_request
    while True:
        page, next_token = fetch_page(request)
        items.extend(page)
        if not next_token:
            return items
        request = {**first_request, token_key: next_token}
