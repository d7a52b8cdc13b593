"""Sensitive content classifier.

An async client that asks the Google Gemini API whether text and images
contain sensitive content.
"""

from sensitive_content_classifier.client import (
    ClassificationOutcome,
    ClassificationResult,
    ClassifierOptions,
    OutcomeKind,
    SensitiveContentClassifier,
    SensitiveLabel,
)

__all__ = [
    "ClassificationOutcome",
    "ClassificationResult",
    "ClassifierOptions",
    "OutcomeKind",
    "SensitiveContentClassifier",
    "SensitiveLabel",
]
