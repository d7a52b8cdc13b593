"""Options object for the sensitive content classifier."""

import os
from dataclasses import dataclass
from typing import Self

from dotenv import load_dotenv

from sensitive_content_classifier.client.consts import (
    API_KEY_ENV_VARS,
    DEFAULT_MAX_OUTPUT_TOKENS,
    DEFAULT_MODEL,
    DEFAULT_TEMPERATURE,
    DEFAULT_TOP_K,
    DEFAULT_TOP_P,
    MODEL_ENV_VAR,
)
from sensitive_content_classifier.client.exceptions import InvalidAuthError

MAX_TEMPERATURE = 2.0


@dataclass(frozen=True)
class ClassifierOptions:
    """Options for configuring the classifier's model and sampling.

    All values are fixed once the options are created and are used to build
    a single generation config that every request shares.

    Attributes:
        api_key: The Gemini API key used to authenticate requests.
        model: The Gemini model used for classification.
            Defaults to "gemini-2.0-flash-lite".
        temperature: Sampling temperature between 0 and 2. Low values keep
            the labels stable across calls.
            Defaults to 0.1.
        top_p: Nucleus sampling probability mass between 0 and 1.
            Defaults to 0.95.
        top_k: Number of highest probability tokens to sample from.
            Defaults to 64.
        max_output_tokens: Upper bound on the response length.
            Defaults to 8192.

    """

    api_key: str
    model: str = DEFAULT_MODEL
    temperature: float = DEFAULT_TEMPERATURE
    top_p: float = DEFAULT_TOP_P
    top_k: int = DEFAULT_TOP_K
    max_output_tokens: int = DEFAULT_MAX_OUTPUT_TOKENS

    def __post_init__(self) -> None:
        """Validate the options.

        Raises:
            InvalidAuthError: If the API key is empty.
            ValueError: If a sampling parameter is out of range.

        """
        if not self.api_key:
            raise InvalidAuthError
        if not self.model:
            msg = "model cannot be empty"
            raise ValueError(msg)
        if not 0.0 <= self.temperature <= MAX_TEMPERATURE:
            msg = "temperature must be between 0 and 2"
            raise ValueError(msg)
        if not 0.0 <= self.top_p <= 1.0:
            msg = "top_p must be between 0 and 1"
            raise ValueError(msg)
        if self.top_k < 1:
            msg = "top_k must be a positive integer"
            raise ValueError(msg)
        if self.max_output_tokens < 1:
            msg = "max_output_tokens must be a positive integer"
            raise ValueError(msg)

    def __repr__(self) -> str:
        """Represent the options without leaking the API key."""
        return (
            f"{type(self).__name__}(api_key='***', model={self.model!r}, "
            f"temperature={self.temperature}, top_p={self.top_p}, "
            f"top_k={self.top_k}, max_output_tokens={self.max_output_tokens})"
        )

    @classmethod
    def from_env(cls, **overrides: float | str) -> Self:
        """Create options from the environment.

        A ``.env`` file is loaded first if one is present. The API key is
        read from ``GEMINI_API_KEY`` or ``GOOGLE_API_KEY`` and the model from
        ``GEMINI_MODEL``.

        Args:
            **overrides: Values that take precedence over the environment.

        Raises:
            InvalidAuthError: If no API key is configured.

        """
        load_dotenv()
        values: dict[str, float | str] = {"api_key": ""}
        for name in API_KEY_ENV_VARS:
            if api_key := os.getenv(name):
                values["api_key"] = api_key
                break
        if model := os.getenv(MODEL_ENV_VAR):
            values["model"] = model
        values.update(overrides)
        return cls(**values)  # type: ignore[arg-type]
