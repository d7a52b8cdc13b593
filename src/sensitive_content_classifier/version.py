"""Single point of truth for the version of the classifier package."""

import importlib.metadata

__version__ = importlib.metadata.version("sensitive_content_classifier")
