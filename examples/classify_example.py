#!/usr/bin/env python3
"""Example script demonstrating text and image classification."""

import argparse
import asyncio
import logging
import sys

from dotenv import load_dotenv

from sensitive_content_classifier.client.classifier_client import (
    SensitiveContentClassifier,
)
from sensitive_content_classifier.client.classifier_options import (
    ClassifierOptions,
)
from sensitive_content_classifier.client.exceptions import ClassifierError
from sensitive_content_classifier.client.image_source import (
    FileImageSource,
    ImageInput,
    UrlImageSource,
)
from sensitive_content_classifier.client.models import OutcomeKind


def build_image_input(image: str | None) -> ImageInput | None:
    """Pick a lazy image source for a path or URL."""
    if image is None:
        return None
    if image.startswith(("http://", "https://")):
        return UrlImageSource(image)
    return FileImageSource(image)


async def classify_example(
    logger: logging.Logger,
    options: ClassifierOptions,
    text: str,
    image: str | None = None,
) -> bool:
    """Classify the given text and optional image.

    Args:
        logger: Logger instance for output
        options: Configuration options for the classifier
        text: Text to classify
        image: Path or URL of an image to classify (optional)

    Returns:
        True if a classification was produced, False otherwise

    """
    async with SensitiveContentClassifier(options, logger=logger) as client:
        logger.info("Classifying with model %s...", options.model)
        outcome = await client.classify_outcome(build_image_input(image), text)

    if outcome.kind is OutcomeKind.EMPTY:
        logger.warning("Model returned no classification")
        return False

    if outcome.result is None:
        logger.error(
            "Classification failed (%s, retryable=%s): %s",
            outcome.kind.value,
            outcome.retryable,
            outcome.error,
        )
        return False

    result = outcome.result
    logger.info("Image classification: %s", result.image_classification)
    logger.info("Text classification: %s", result.text_classification)
    logger.info("Is sensitive: %s", "Yes" if result.is_sensitive else "No")
    if not result.labels_consistent:
        logger.warning("isSensitive disagrees with the returned labels")
    return True


def main() -> int:
    """Run the example."""
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument(
        "text",
        nargs="?",
        default="This image might contain sensitive content.",
        help="Text to classify",
    )
    parser.add_argument("--image", help="Path or URL of an image to classify")
    parser.add_argument("--model", help="Gemini model to use")
    parser.add_argument(
        "--verbose", action="store_true", help="Enable debug logging"
    )
    args = parser.parse_args()

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )
    logger = logging.getLogger(__name__)

    load_dotenv()
    try:
        overrides = {"model": args.model} if args.model else {}
        options = ClassifierOptions.from_env(**overrides)
    except ClassifierError:
        logger.exception("Set GEMINI_API_KEY in the environment or .env")
        return 1

    success = asyncio.run(
        classify_example(logger, options, args.text, args.image)
    )
    return 0 if success else 1


if __name__ == "__main__":
    sys.exit(main())
