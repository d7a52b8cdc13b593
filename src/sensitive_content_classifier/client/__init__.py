"""Sensitive Content Classifier client.

This module provides a client for classifying text and images with the
Google Gemini API.
"""

from sensitive_content_classifier.client.classifier_client import (
    SensitiveContentClassifier,
)
from sensitive_content_classifier.client.classifier_options import (
    ClassifierOptions,
)
from sensitive_content_classifier.client.exceptions import (
    ClassifierError,
    EncodingError,
    ImageAcquisitionError,
    InvalidAuthError,
    MalformedResponseError,
    ResolutionError,
    TransportError,
)
from sensitive_content_classifier.client.image_source import (
    FileImageSource,
    ImageInput,
    ImageStream,
    ImageStreamListener,
    LazyImageSource,
    MemoryImageSource,
    UrlImageSource,
    to_image_bytes,
)
from sensitive_content_classifier.client.labels import (
    SensitiveLabel,
    is_sensitive_label,
)
from sensitive_content_classifier.client.models import (
    ClassificationOutcome,
    ClassificationResult,
    OutcomeKind,
)

__all__ = [
    "ClassificationOutcome",
    "ClassificationResult",
    "ClassifierError",
    "ClassifierOptions",
    "EncodingError",
    "FileImageSource",
    "ImageAcquisitionError",
    "ImageInput",
    "ImageStream",
    "ImageStreamListener",
    "InvalidAuthError",
    "LazyImageSource",
    "MalformedResponseError",
    "MemoryImageSource",
    "OutcomeKind",
    "ResolutionError",
    "SensitiveContentClassifier",
    "SensitiveLabel",
    "TransportError",
    "UrlImageSource",
    "is_sensitive_label",
    "to_image_bytes",
]
