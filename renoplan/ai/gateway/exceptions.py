"""AI gateway exceptions."""


class GatewayError(Exception):
    """Base exception for AI gateway errors."""

    def __init__(
        self,
        message: str,
        status_code: int | None = None,
        original_error: Exception | None = None,
    ):
        """Initialize gateway error.

        Args:
            message: Error message
            status_code: HTTP status returned by the gateway, if any
            original_error: Original exception that caused this error
        """
        super().__init__(message)
        self.message = message
        self.status_code = status_code
        self.original_error = original_error


class GatewayConfigurationError(GatewayError):
    """Raised when the gateway API key is not configured."""

    pass


class GatewayRateLimitError(GatewayError):
    """Exception raised for rate limit errors (429)."""

    def __init__(
        self,
        message: str = "Rate limits exceeded, please try again later.",
        original_error: Exception | None = None,
    ):
        super().__init__(message, status_code=429, original_error=original_error)


class GatewayPaymentRequiredError(GatewayError):
    """Exception raised when the AI workspace is out of credits (402)."""

    def __init__(
        self,
        message: str = "Payment required, please add funds to your AI workspace.",
        original_error: Exception | None = None,
    ):
        super().__init__(message, status_code=402, original_error=original_error)


class GatewayBadRequestError(GatewayError):
    """Exception raised for rejected requests (400), e.g. unreadable images."""

    def __init__(self, message: str, original_error: Exception | None = None):
        super().__init__(message, status_code=400, original_error=original_error)


class GatewayNoToolCallError(GatewayError):
    """The model answered without calling the forced function."""

    pass
