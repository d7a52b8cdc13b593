"""Module containing the classification result model.

The result mirrors the JSON object the generative model is instructed to
return. Attribute names are snake_case while the wire keys keep the camelCase
names of the response schema.
"""

import dataclasses
import json
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any, Self

from sensitive_content_classifier.client.consts import (
    IMAGE_CLASSIFICATION_KEY,
    IS_SENSITIVE_KEY,
    TEXT_CLASSIFICATION_KEY,
)
from sensitive_content_classifier.client.exceptions import (
    MalformedResponseError,
)
from sensitive_content_classifier.client.labels import is_sensitive_label


def _require(
    mapping: Mapping[str, Any], key: str, expected: type
) -> Any:  # noqa: ANN401
    if key not in mapping:
        msg = f"Missing required key '{key}'"
        raise MalformedResponseError(msg)
    value = mapping[key]
    # bool is a subclass of int, so compare exact types
    if type(value) is not expected:
        msg = (
            f"Expected '{key}' to be {expected.__name__}, "
            f"got {type(value).__name__}"
        )
        raise MalformedResponseError(msg)
    return value


@dataclass(frozen=True)
class ClassificationResult:
    """Result of classifying a piece of text and/or an image.

    Attributes:
        image_classification: Label assigned to the image, or ``"none"``
            when no image was provided.
        text_classification: Label assigned to the text, or ``"none"`` when
            no text was provided.
        is_sensitive: Whether the model considers any of the content
            sensitive.

    """

    image_classification: str
    text_classification: str
    is_sensitive: bool

    def to_dict(self) -> dict[str, Any]:
        """Convert the result to its wire mapping."""
        return {
            IMAGE_CLASSIFICATION_KEY: self.image_classification,
            TEXT_CLASSIFICATION_KEY: self.text_classification,
            IS_SENSITIVE_KEY: self.is_sensitive,
        }

    @classmethod
    def from_dict(cls, mapping: Mapping[str, Any]) -> Self:
        """Build a result from its wire mapping.

        Args:
            mapping: Mapping with the ``imageClassification``,
                ``textClassification`` and ``isSensitive`` keys.

        Returns:
            The parsed result.

        Raises:
            MalformedResponseError: If a key is missing or has the wrong type.

        """
        if not isinstance(mapping, Mapping):
            msg = f"Expected a JSON object, got {type(mapping).__name__}"
            raise MalformedResponseError(msg)

        return cls(
            image_classification=_require(
                mapping, IMAGE_CLASSIFICATION_KEY, str
            ),
            text_classification=_require(mapping, TEXT_CLASSIFICATION_KEY, str),
            is_sensitive=_require(mapping, IS_SENSITIVE_KEY, bool),
        )

    def to_json(self) -> str:
        """Encode the result as JSON text."""
        return json.dumps(self.to_dict())

    @classmethod
    def from_json(cls, source: str | bytes) -> Self:
        """Decode a result from JSON text.

        Raises:
            MalformedResponseError: If the text is not valid JSON or does not
                describe a valid result.

        """
        try:
            decoded = json.loads(source)
        except (json.JSONDecodeError, UnicodeDecodeError) as e:
            msg = f"Response is not valid JSON: {e}"
            raise MalformedResponseError(msg) from e
        return cls.from_dict(decoded)

    def copy_with(self, **changes: Any) -> Self:  # noqa: ANN401
        """Return a copy with the given fields replaced."""
        return dataclasses.replace(self, **changes)

    @property
    def labels_consistent(self) -> bool:
        """Whether ``is_sensitive`` agrees with the two labels.

        The model's ``is_sensitive`` value is never corrected; this only
        reports whether it disagrees with the labels it returned.
        """
        expected = is_sensitive_label(
            self.image_classification
        ) or is_sensitive_label(self.text_classification)
        return expected == self.is_sensitive
