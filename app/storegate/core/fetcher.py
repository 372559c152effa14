"""Remote whitelist retrieval.

The remote source answers a GET with either a raw JSON array of entry
strings, or a source-control "contents" envelope whose ``content`` field
holds the same array base64-encoded.
"""

import base64
import binascii
import json
import logging
from enum import Enum
from types import TracebackType

import httpx

from storegate import __version__

logger = logging.getLogger(__name__)


class FetchErrorKind(Enum):
    """Reason a fetch failed."""

    NETWORK = "network"
    HTTP = "http"
    DECODE = "decode"
    PARSE = "parse"


class FetchError(Exception):
    """Raised when the remote whitelist cannot be retrieved.

    Attributes:
        kind: Failure category.
        status_code: HTTP status for HTTP failures, None otherwise.
    """

    def __init__(self, kind: FetchErrorKind, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.kind = kind
        self.status_code = status_code


def _require_entry_list(data: object, origin: str) -> list[str]:
    if not isinstance(data, list) or not all(isinstance(item, str) for item in data):
        raise FetchError(FetchErrorKind.PARSE, f"{origin} is not a JSON array of strings")
    return data


def decode_payload(data: object) -> list[str]:
    """Turn a decoded JSON response body into whitelist entries.

    Args:
        data: Parsed JSON body, either an array or a contents envelope.

    Returns:
        Raw whitelist entries.

    Raises:
        FetchError: DECODE for bad base64, PARSE for any unexpected shape.
    """
    if isinstance(data, list):
        return _require_entry_list(data, "Response")

    if isinstance(data, dict) and isinstance(data.get("content"), str):
        # Contents APIs wrap the base64 text at fixed line lengths
        encoded = "".join(data["content"].split())
        try:
            text = base64.b64decode(encoded, validate=True).decode("utf-8")
        except (binascii.Error, UnicodeDecodeError) as e:
            raise FetchError(FetchErrorKind.DECODE, f"Invalid base64 content: {e}") from e
        try:
            inner = json.loads(text)
        except json.JSONDecodeError as e:
            raise FetchError(FetchErrorKind.PARSE, f"Invalid JSON in envelope content: {e}") from e
        return _require_entry_list(inner, "Envelope content")

    raise FetchError(FetchErrorKind.PARSE, "Unrecognized response shape")


class RemoteFetcher:
    """Fetches the whitelist from a configured URL.

    Example:
        >>> with RemoteFetcher("https://example.com/whitelist.json") as fetcher:
        ...     entries = fetcher.fetch()
    """

    def __init__(
        self,
        url: str,
        *,
        timeout: float = 10.0,
        client: httpx.Client | None = None,
    ) -> None:
        """Initialize RemoteFetcher.

        Args:
            url: Whitelist URL.
            timeout: Request timeout in seconds, after which the fetch
                fails as a network error.
            client: Optional preconfigured client. The fetcher only closes
                clients it created itself.
        """
        self.url = url
        self._owns_client = client is None
        self._client = client or httpx.Client(
            timeout=timeout,
            follow_redirects=True,
            headers={"User-Agent": f"storegate/{__version__}"},
        )

    def fetch(self) -> list[str]:
        """Retrieve the current remote whitelist.

        Returns:
            Raw whitelist entries. No partial result is ever returned.

        Raises:
            FetchError: On network, HTTP, decode or parse failure.
        """
        try:
            response = self._client.get(self.url)
        except (httpx.RequestError, httpx.InvalidURL) as e:
            raise FetchError(FetchErrorKind.NETWORK, f"Request to {self.url} failed: {e}") from e

        if not response.is_success:
            raise FetchError(
                FetchErrorKind.HTTP,
                f"Unexpected status {response.status_code} from {self.url}",
                status_code=response.status_code,
            )

        try:
            data = response.json()
        except (json.JSONDecodeError, UnicodeDecodeError) as e:
            raise FetchError(FetchErrorKind.PARSE, f"Invalid JSON response: {e}") from e

        entries = decode_payload(data)
        logger.debug("Fetched %d whitelist entries from %s", len(entries), self.url)
        return entries

    def close(self) -> None:
        if self._owns_client:
            self._client.close()

    def __enter__(self) -> "RemoteFetcher":
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.close()
