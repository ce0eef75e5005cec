"""Custom exception classes for the Firecrawl API client."""

from typing import Any


class FirecrawlError(Exception):
    """Base exception for all Firecrawl API errors."""

    def __init__(
        self,
        message: str,
        status_code: int | None = None,
        response_data: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.status_code = status_code
        self.response_data = response_data

    def __str__(self) -> str:
        if self.status_code:
            return f"Firecrawl API Error ({self.status_code}): {self.message}"
        return f"Firecrawl API Error: {self.message}"


class FirecrawlAuthenticationError(FirecrawlError):
    """Exception raised for authentication errors (401)."""

    def __init__(self, message: str = "Invalid Firecrawl API key") -> None:
        super().__init__(message=message, status_code=401)


class FirecrawlRateLimitError(FirecrawlError):
    """Exception raised for rate limit errors (429)."""

    def __init__(self, message: str = "Rate limit exceeded") -> None:
        super().__init__(message=message, status_code=429)


class FirecrawlServerError(FirecrawlError):
    """Exception raised for server errors (5xx)."""

    def __init__(
        self, message: str = "Internal server error occurred", status_code: int = 500
    ) -> None:
        super().__init__(message=message, status_code=status_code)
