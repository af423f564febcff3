INVALID_REQUEST_MESSAGE = "Message is required"
UPSTREAM_ERROR_MESSAGE = "An error occurred while processing your request."


class InvalidRequest(Exception):
    """The chat body is missing a non-empty ``message`` string."""

    def __init__(self, message: str = INVALID_REQUEST_MESSAGE):
        super().__init__(message)
        self.message = message


class UpstreamError(Exception):
    """The completion API call failed or returned something unusable.

    ``detail`` holds whatever the provider sent back and is only meant for
    server-side logs.
    """

    def __init__(self, message: str, status_code=None, detail=None):
        super().__init__(message)
        self.status_code = status_code
        self.detail = detail


class StartupConfigurationError(RuntimeError):
    pass
