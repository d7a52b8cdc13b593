"""The Sensitive Content Classifier Class."""

import logging
import types

import httpx
from google import genai
from google.genai import errors
from google.genai import types as genai_types
from PIL import Image

from sensitive_content_classifier.client.classifier_options import (
    ClassifierOptions,
)
from sensitive_content_classifier.client.consts import (
    CLASSIFICATION_PROMPT,
    IMAGE_CLASSIFICATION_KEY,
    IMAGE_MIME_TYPE,
    IS_SENSITIVE_KEY,
    RESPONSE_MIME_TYPE,
    TEXT_CLASSIFICATION_KEY,
)
from sensitive_content_classifier.client.exceptions import (
    ImageAcquisitionError,
    MalformedResponseError,
    TransportError,
)
from sensitive_content_classifier.client.image_source import (
    ImageInput,
    LazyImageSource,
    to_image_bytes,
)
from sensitive_content_classifier.client.models import (
    ClassificationOutcome,
    ClassificationResult,
)

# Provider-side filters would hide exactly the content we want labelled
_UNFILTERED_CATEGORIES = (
    genai_types.HarmCategory.HARM_CATEGORY_SEXUALLY_EXPLICIT,
    genai_types.HarmCategory.HARM_CATEGORY_DANGEROUS_CONTENT,
    genai_types.HarmCategory.HARM_CATEGORY_HARASSMENT,
    genai_types.HarmCategory.HARM_CATEGORY_HATE_SPEECH,
)


def build_response_schema() -> genai_types.Schema:
    """Build the JSON schema the model must answer with."""
    return genai_types.Schema(
        type=genai_types.Type.OBJECT,
        properties={
            IMAGE_CLASSIFICATION_KEY: genai_types.Schema(
                type=genai_types.Type.STRING, nullable=False
            ),
            TEXT_CLASSIFICATION_KEY: genai_types.Schema(
                type=genai_types.Type.STRING, nullable=False
            ),
            IS_SENSITIVE_KEY: genai_types.Schema(
                type=genai_types.Type.BOOLEAN, nullable=False
            ),
        },
        required=[
            IMAGE_CLASSIFICATION_KEY,
            TEXT_CLASSIFICATION_KEY,
            IS_SENSITIVE_KEY,
        ],
    )


def build_generation_config(
    options: ClassifierOptions,
) -> genai_types.GenerateContentConfig:
    """Build the generation config shared by every request."""
    return genai_types.GenerateContentConfig(
        temperature=options.temperature,
        top_p=options.top_p,
        top_k=options.top_k,
        max_output_tokens=options.max_output_tokens,
        response_mime_type=RESPONSE_MIME_TYPE,
        response_schema=build_response_schema(),
        safety_settings=[
            genai_types.SafetySetting(
                category=category,
                threshold=genai_types.HarmBlockThreshold.BLOCK_NONE,
            )
            for category in _UNFILTERED_CATEGORIES
        ],
    )


def build_contents(
    image_bytes: bytes | None, text: str = ""
) -> list[genai_types.Content]:
    """Build the request payload for a classification call.

    Args:
        image_bytes: Encoded image to classify, if any.
        text: Text to classify. May be empty.

    Returns:
        A single user turn holding the instruction, the text and, when an
        image is given, the image tagged as JPEG.

    """
    parts = [
        genai_types.Part.from_text(text=CLASSIFICATION_PROMPT),
        genai_types.Part.from_text(text=text),
    ]
    if image_bytes is not None:
        parts.append(
            genai_types.Part.from_bytes(
                data=image_bytes, mime_type=IMAGE_MIME_TYPE
            )
        )
    return [genai_types.Content(role="user", parts=parts)]


class SensitiveContentClassifier:
    """The Sensitive Content Classifier Class.

    This class provides coroutine methods that ask a Gemini model whether
    text and images contain sensitive content. It only holds immutable
    configuration, so concurrent calls on one instance are independent.

    Example:
        ```python
        options = ClassifierOptions(api_key="your-key")
        async with SensitiveContentClassifier(options) as classifier:
            result = await classifier.classify(text="Some text")
            if result is not None and result.is_sensitive:
                print(result.text_classification)
        ```

    """

    def __init__(
        self,
        options: ClassifierOptions,
        *,
        client: genai.Client | None = None,
        logger: logging.Logger | None = None,
    ) -> None:
        """Initialize the classifier.

        Args:
            options: Model and sampling configuration.
            client: Gemini client to issue requests with. One is created from
                ``options.api_key`` when omitted and closed by :meth:`close`.
            logger: Logger that receives failure reports. Defaults to this
                module's logger.

        """
        self.logger = logger or logging.getLogger(__name__)
        self.options = options
        self._owns_client = client is None
        self.client = client or genai.Client(api_key=options.api_key)
        self.config = build_generation_config(options)

    async def classify(
        self, image_bytes: bytes | None = None, text: str = ""
    ) -> ClassificationResult | None:
        """Classify text and an optional encoded image.

        Failures are logged and reported as ``None``, the same as a response
        without text. Use :meth:`classify_outcome` to tell them apart.

        Args:
            image_bytes: Encoded image bytes, or None to classify text only.
                Empty bytes are treated the same as None. Pillow images and
                lazy sources go through :meth:`classify_image` and
                :meth:`classify_image_source`.
            text: Text to classify. May be empty.

        Returns:
            The classification, or None if no usable result was produced.

        """
        outcome = await self.classify_outcome(image_bytes, text)
        return outcome.result

    async def classify_image(
        self, image: Image.Image, text: str = ""
    ) -> ClassificationResult | None:
        """Classify a decoded image, encoding it as PNG first."""
        outcome = await self.classify_outcome(image, text)
        return outcome.result

    async def classify_image_source(
        self, source: LazyImageSource, text: str = ""
    ) -> ClassificationResult | None:
        """Classify the first frame of a lazy image source."""
        outcome = await self.classify_outcome(source, text)
        return outcome.result

    async def classify_outcome(
        self, image: ImageInput | None = None, text: str = ""
    ) -> ClassificationOutcome:
        """Classify text and an optional image, keeping failure kinds apart.

        Args:
            image: Encoded bytes, a Pillow image, a lazy image source, or
                None to classify text only.
            text: Text to classify. May be empty.

        Returns:
            A successful outcome with the result, an empty outcome when the
            model returned no text, or a failure outcome with its error.

        """
        image_bytes: bytes | None = None
        if image is not None:
            try:
                image_bytes = await to_image_bytes(image)
            except ImageAcquisitionError as e:
                self.logger.error("Error while converting to bytes: %s", e)
                return ClassificationOutcome.failure(e)

        if not image_bytes:
            # A zero-length buffer carries no image; send text only
            image_bytes = None

        try:
            response_text = await self._generate(image_bytes, text)
        except TransportError as e:
            self.logger.error("Error while analysing content: %s", e)
            return ClassificationOutcome.failure(e)

        if not response_text:
            self.logger.debug("Classification response contained no text")
            return ClassificationOutcome.empty()

        try:
            result = ClassificationResult.from_json(response_text)
        except MalformedResponseError as e:
            self.logger.error("Error while parsing classification: %s", e)
            return ClassificationOutcome.failure(e)

        return ClassificationOutcome.success(result)

    async def _generate(
        self, image_bytes: bytes | None, text: str
    ) -> str | None:
        """Issue a single request and return the response text."""
        contents = build_contents(image_bytes, text)
        self.logger.debug(
            "Requesting classification (model=%s, parts=%d)",
            self.options.model,
            len(contents[0].parts or []),
        )

        try:
            response = await self.client.aio.models.generate_content(
                model=self.options.model,
                contents=contents,
                config=self.config,
            )
            response_text = response.text
        except errors.APIError as e:
            raise TransportError(str(e), status_code=e.code) from e
        except (httpx.HTTPError, OSError) as e:
            raise TransportError(str(e)) from e
        except Exception as e:
            # Alternate HTTP backends and response parsing raise their own types
            raise TransportError(f"{type(e).__name__}: {e}") from e

        return response_text

    async def close(self) -> None:
        """Close the Gemini client if this classifier created it."""
        if self._owns_client:
            await self.client.aio.aclose()

    async def __aenter__(self) -> "SensitiveContentClassifier":
        """Context manager entry point."""
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: types.TracebackType | None,
    ) -> None:
        """Context manager exit point."""
        await self.close()
