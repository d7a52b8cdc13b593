"""Explicit outcome of a classification call."""

import enum
from dataclasses import dataclass
from typing import Self

from sensitive_content_classifier.client.exceptions import (
    ClassifierError,
    ImageAcquisitionError,
    MalformedResponseError,
    TransportError,
)
from sensitive_content_classifier.client.models.classification_result import (
    ClassificationResult,
)


class OutcomeKind(enum.Enum):
    """Kind of outcome produced by a classification call."""

    SUCCESS = "success"
    EMPTY = "empty"
    TRANSPORT_FAILURE = "transport_failure"
    MALFORMED_RESPONSE = "malformed_response"
    IMAGE_ACQUISITION_FAILURE = "image_acquisition_failure"


_ERROR_KINDS: tuple[tuple[type[ClassifierError], OutcomeKind], ...] = (
    (TransportError, OutcomeKind.TRANSPORT_FAILURE),
    (MalformedResponseError, OutcomeKind.MALFORMED_RESPONSE),
    (ImageAcquisitionError, OutcomeKind.IMAGE_ACQUISITION_FAILURE),
)


@dataclass(frozen=True)
class ClassificationOutcome:
    """Result of a classification call that keeps failure kinds apart.

    An ``EMPTY`` outcome means the model returned no text. It is not an
    error. Failure outcomes carry the error that caused them so callers can
    decide whether to retry.

    Attributes:
        kind: What happened.
        result: The parsed result, set only for ``SUCCESS``.
        error: The failure, set only for failure kinds.

    """

    kind: OutcomeKind
    result: ClassificationResult | None = None
    error: ClassifierError | None = None

    @classmethod
    def success(cls, result: ClassificationResult) -> Self:
        """Create a successful outcome."""
        return cls(OutcomeKind.SUCCESS, result=result)

    @classmethod
    def empty(cls) -> Self:
        """Create an outcome for a response without text."""
        return cls(OutcomeKind.EMPTY)

    @classmethod
    def failure(cls, error: ClassifierError) -> Self:
        """Create a failure outcome, deriving its kind from the error type.

        Raises:
            TypeError: If the error does not belong to a failure kind.

        """
        for error_type, kind in _ERROR_KINDS:
            if isinstance(error, error_type):
                return cls(kind, error=error)
        msg = f"No outcome kind for {type(error).__name__}"
        raise TypeError(msg)

    @property
    def ok(self) -> bool:
        """Whether a result is available."""
        return self.kind is OutcomeKind.SUCCESS

    @property
    def retryable(self) -> bool:
        """Whether repeating the call may produce a different outcome."""
        return isinstance(self.error, TransportError) and self.error.retryable
