"""Label vocabulary the classification model chooses from."""

import enum


class SensitiveLabel(enum.StrEnum):
    """Possible classification outcomes for a piece of content.

    ``NONE`` is used when the corresponding input (text or image) was not
    provided. ``NOT_SENSITIVE`` is used when the content was inspected and
    found to be safe.
    """

    NONE = "none"
    GORE = "gore"
    VIOLENCE = "violence"
    NUDITY = "nudity"
    RACISM = "racism"
    HATE_SPEECH = "hateSpeech"
    OFFENSIVE = "offensive"
    NOT_SENSITIVE = "notSensitive"


_NON_SENSITIVE_LABELS = frozenset(
    {SensitiveLabel.NONE, SensitiveLabel.NOT_SENSITIVE}
)


def is_sensitive_label(label: str) -> bool:
    """Check whether a classification label marks content as sensitive.

    Labels outside the known vocabulary are treated as sensitive, since the
    only labels that clear content are ``none`` and ``notSensitive``.

    Args:
        label: A classification label as returned by the model.

    Returns:
        True unless the label is ``none`` or ``notSensitive``.

    """
    return label not in _NON_SENSITIVE_LABELS
