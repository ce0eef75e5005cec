"""Exceptions raised by the Renoplan API client."""


class APIClientError(Exception):
    """A Renoplan API call failed.

    `message` is the server's `detail` or `error` field when it sent one.
    """

    def __init__(
        self,
        message: str,
        status_code: int | None = None,
        response_data: dict | None = None,
    ):
        self.message = message
        self.status_code = status_code
        self.response_data = response_data or {}
        super().__init__(self.message)

    def __str__(self) -> str:
        if self.status_code:
            return f"[{self.status_code}] {self.message}"
        return self.message
