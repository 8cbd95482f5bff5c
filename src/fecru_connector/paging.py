"""Continuation helpers for paged listings."""

import logging
from typing import Any, AsyncIterator, Awaitable, Callable, Mapping, Optional, Union

from .models import PagedRequestOptions, PagedResponse

logger = logging.getLogger(__name__)

PageFetcher = Callable[[PagedRequestOptions], Awaitable[Mapping[str, Any]]]


def get_next_paged_request_options(
    last_result: Union[PagedResponse, Mapping[str, Any]],
    limit: Optional[int] = None,
) -> Optional[PagedRequestOptions]:
    """Calculate the paging options that continue a previous listing.

    Args:
        last_result: Page returned by the previous request
        limit: Page size for the next request; defaults to the previous limit

    Returns:
        Options for the next page, or None if ``last_result`` was the last page
    """
    page = (
        last_result
        if isinstance(last_result, PagedResponse)
        else PagedResponse.model_validate(last_result)
    )
    if page.last_page:
        return None
    return PagedRequestOptions(limit=limit or page.limit, start=page.start + page.size)


async def iterate_pages(
    fetch_page: PageFetcher,
    options: Optional[PagedRequestOptions] = None,
    limit: Optional[int] = None,
) -> AsyncIterator[Mapping[str, Any]]:
    """Yield every page of a listing, starting at ``options``.

    Args:
        fetch_page: Coroutine function that loads one page for given options
        options: Options of the first page (default: server defaults)
        limit: Page size for follow-up pages

    Yields:
        Decoded pages as returned by ``fetch_page``
    """
    next_options: Optional[PagedRequestOptions] = options or PagedRequestOptions(
        limit=limit
    )
    while next_options is not None:
        page = await fetch_page(next_options)
        yield page
        previous_start = next_options.start
        next_options = get_next_paged_request_options(page, limit)
        if next_options is not None:
            if next_options.start == previous_start:
                # an empty page that is not flagged as last would loop forever
                logger.warning(
                    f"Paged listing made no progress at start={previous_start}"
                )
                return
            logger.debug(
                f"Continuing paged listing at start={next_options.start}, "
                f"limit={next_options.limit}"
            )
