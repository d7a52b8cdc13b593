"""Base classes for all classifier exceptions."""

from sensitive_content_classifier.client.consts import (
    HTTP_SERVER_ERROR,
    HTTP_TOO_MANY_REQUESTS,
)


class ClassifierError(Exception):
    """Base class for all classifier exceptions."""

    default_message = "Classifier error"

    def __init__(self, message: str | None = None) -> None:
        """Initialize with a message, falling back to the default one."""
        super().__init__(message or self.default_message)


class InvalidAuthError(ClassifierError):
    """Raised when the API key is invalid."""

    default_message = "api_key cannot be empty"


class TransportError(ClassifierError):
    """Raised when the provider call fails before a response is produced.

    Covers network errors, authentication failures and rate limiting
    reported by the generative model API.
    """

    default_message = "Failed to reach the classification service"

    def __init__(
        self, message: str | None = None, status_code: int | None = None
    ) -> None:
        """Initialize the transport error.

        Args:
            message: Description of the failure.
            status_code: HTTP status reported by the provider, if any.

        """
        super().__init__(message)
        self.status_code = status_code

    @property
    def retryable(self) -> bool:
        """Whether repeating the same request may succeed."""
        if self.status_code is None:
            return True
        return (
            self.status_code == HTTP_TOO_MANY_REQUESTS
            or self.status_code >= HTTP_SERVER_ERROR
        )


class MalformedResponseError(ClassifierError, ValueError):
    """Raised when the response does not match the result schema."""

    default_message = "Invalid classification response"


class ImageAcquisitionError(ClassifierError):
    """Raised when image bytes cannot be obtained from an image source."""

    default_message = "Failed to acquire image bytes"


class EncodingError(ImageAcquisitionError):
    """Raised when a decoded image cannot be encoded to bytes."""

    default_message = "Image encoder produced no data"


class ResolutionError(ImageAcquisitionError):
    """Raised when a lazy image source reports an error instead of a frame."""

    default_message = "Image source failed to resolve"
