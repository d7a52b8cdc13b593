import os

import pytest
import pytest_asyncio
from dotenv import load_dotenv

from sensitive_content_classifier.client.classifier_client import (
    SensitiveContentClassifier,
)
from sensitive_content_classifier.client.classifier_options import (
    ClassifierOptions,
)


@pytest.fixture
def classifier_options() -> ClassifierOptions:
    load_dotenv()
    if not (os.getenv("GEMINI_API_KEY") or os.getenv("GOOGLE_API_KEY")):
        pytest.skip("GEMINI_API_KEY is not configured")
    return ClassifierOptions.from_env()


@pytest_asyncio.fixture
async def classifier(classifier_options: ClassifierOptions):  # noqa: ANN201
    async with SensitiveContentClassifier(classifier_options) as classifier:
        yield classifier
