from typing import Optional

ERROR_PREFIX = "TecDoc API error"

STATUS_MESSAGES = {
    400: "Bad Request - Missing or invalid parameters",
    401: "Unauthorized - API key is missing or invalid",
    403: "Forbidden - API key does not have permission or IP not whitelisted",
    404: "Vehicle or resource not found",
    407: "Authentication failed - API key might be expired or invalid",
    429: "Rate limit exceeded - too many requests",
    500: "Internal server error - please try again later",
}


def classify_status(status: int, status_text: Optional[str] = None) -> str:
    """Maps an upstream status code to a human-readable message.

    Unmapped codes fall back to the upstream status text, then to 'Unknown error'.
    """
    return STATUS_MESSAGES.get(status) or status_text or "Unknown error"


class TecDocError(Exception):
    """Base exception for everything the TecDoc gateway raises."""

    def __init__(self, message: str):
        self.message = message
        super().__init__(f"{ERROR_PREFIX}: {message}")


class TecDocTransportError(TecDocError):
    """Network, DNS or timeout failure before a response arrived."""
    pass


class TecDocHTTPError(TecDocError):
    """Upstream answered with a non-2xx HTTP status."""

    def __init__(self, status_code: int, status_text: str, body: str = ""):
        self.status_code = status_code
        self.status_text = status_text
        self.body = body
        upstream = f"{status_code} {status_text}".strip()
        super().__init__(f"{classify_status(status_code, status_text)} (HTTP {upstream})")


class TecDocParseError(TecDocError):
    """Response body was not the JSON shape the method promises."""

    def __init__(self, message: str, raw_text: str = ""):
        self.raw_text = raw_text
        super().__init__(message)


class TecDocNotFoundError(TecDocError):
    """A lookup that must return a record came back empty."""
    pass


class TecDocApplicationError(TecDocError):
    """A 2xx response whose envelope carries a non-200 `status`."""

    def __init__(self, status: int, status_text: Optional[str] = None):
        self.status = status
        self.status_text = status_text
        super().__init__(classify_status(status, status_text))
