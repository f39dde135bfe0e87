"""
Streaming network downloads.

This module opens HTTP/HTTPS downloads as forward-only byte streams so
an archive can be piped straight into extraction without landing on
disk first:
- TLS verification and redirect following (via requests)
- Transfer content-encoding decoded transparently
- Timeout handling
- Errors raised as DownloadError, chained to the requests or urllib3
  exception (a connection dropped mid-body surfaces from urllib3)

No retry is attempted: a failed download is reported to the caller.
"""

import logging
from contextlib import contextmanager
from typing import BinaryIO, Iterator, Optional

import requests
from requests.exceptions import RequestException
from urllib3.exceptions import HTTPError as TransportError

from npmvm.core.exceptions import DownloadError

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 30


@contextmanager
def open_download_stream(
    url: str,
    timeout: Optional[int] = DEFAULT_TIMEOUT,
    session: Optional[requests.Session] = None,
) -> Iterator[BinaryIO]:
    """
    Open a URL as a readable binary stream.

    Args:
        url: URL to download from
        timeout: Connect/read timeout in seconds (None waits forever)
        session: Optional requests session to issue the request with

    Yields:
        File-like object producing the response body

    Raises:
        DownloadError: If the request fails or returns an error status
        ValueError: If URL is empty

    Example:
        >>> with open_download_stream("https://example.com/pkg.tar.gz") as stream:
        ...     data = stream.read(1024)
    """
    if not url:
        raise ValueError("URL cannot be empty")

    http = session or requests
    logger.debug(f"Opening download stream: {url}")

    try:
        response = http.get(url, stream=True, timeout=timeout, allow_redirects=True)
        response.raise_for_status()
    except RequestException as e:
        raise DownloadError(f"Download of {url} failed: {e}") from e

    try:
        response.raw.decode_content = True
        yield response.raw
    except (RequestException, TransportError) as e:
        raise DownloadError(f"Download of {url} was interrupted: {e}") from e
    finally:
        response.close()
