"""Constants shared across the classifier client."""

DEFAULT_MODEL = "gemini-2.0-flash-lite"
DEFAULT_TEMPERATURE = 0.1
DEFAULT_TOP_P = 0.95
DEFAULT_TOP_K = 64
DEFAULT_MAX_OUTPUT_TOKENS = 8192

# Images are always tagged as JPEG regardless of their actual encoding
IMAGE_MIME_TYPE = "image/jpeg"
RESPONSE_MIME_TYPE = "application/json"

IMAGE_CLASSIFICATION_KEY = "imageClassification"
TEXT_CLASSIFICATION_KEY = "textClassification"
IS_SENSITIVE_KEY = "isSensitive"

CLASSIFICATION_PROMPT = (
    "Classify images or sentences as sensitive or not. I need you to "
    "disclose between different types of sensistive content: 'gore', "
    "'violence', 'nudity', 'racism', 'hateSpeech', 'offensive', "
    "'notSensitive'. If an image is not provided use 'none' as the "
    "classification result. If no text is provided use 'none' as "
    "classification result."
)

API_KEY_ENV_VARS = ("GEMINI_API_KEY", "GOOGLE_API_KEY")
MODEL_ENV_VAR = "GEMINI_MODEL"

HTTP_TOO_MANY_REQUESTS = 429
HTTP_SERVER_ERROR = 500
