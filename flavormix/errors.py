"""Error taxonomy for the mix pipeline."""


class MixError(Exception):
    """Base class for failures that end a mix request."""

    status: str = "INTERNAL"
    http_status: int = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    @property
    def public_message(self) -> str:
        """Message that is safe to send back to the caller."""
        return self.message


class InvalidArgument(MixError):
    """The request payload is missing a required field."""

    status = "INVALID_ARGUMENT"
    http_status = 400


class UpstreamFailure(MixError):
    """The document store or the completion API failed."""

    status = "INTERNAL"
    http_status = 500

    @property
    def public_message(self) -> str:
        return "Internal Server Error"
