"""Package containing the result models of the classifier client."""

from .classification_result import ClassificationResult
from .outcome import ClassificationOutcome, OutcomeKind

__all__ = ["ClassificationOutcome", "ClassificationResult", "OutcomeKind"]
