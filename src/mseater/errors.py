"""Error hierarchy for crawl failure classification.

The orchestrator retries TransientError per showing with tenacity and
classifies anything else derived from ScrapingError as a failed showing.
SearchError and CrawlCancelledError are the only errors that abort a crawl.

Example usage with tenacity:
    AsyncRetrying(retry=retry_if_exception_type(TransientError), stop=stop_after_attempt(3))
"""


class ScrapingError(Exception):
    """Base exception for all crawling errors."""

    pass


class TransientError(ScrapingError):
    """Temporary failure that may succeed on retry.

    Examples: seat page navigation timeout, seat map never rendered,
    malformed reservation attribute, no seats found on the page.
    """

    pass


class PermanentError(ScrapingError):
    """Failure that won't succeed on retry."""

    pass


class SearchError(PermanentError):
    """The search page could not be loaded or listed no showings.

    Fatal for the whole crawl: there is nothing to inspect.
    """

    pass


class CrawlCancelledError(ScrapingError):
    """The crawl deadline expired and the browser session was torn down."""

    pass
