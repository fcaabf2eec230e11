import re

TOKEN_TEMPLATE = "{{{{{category}_{ordinal}}}}}"
# placeholder shape issued by the span protector
TOKEN_PATTERN = re.compile(r"\{\{(?:CODE|EQUATION|IMAGE|DIAGRAM)_\d+\}\}")

DEFAULT_MODEL_NAME = "gemini-2.0-flash"
DEFAULT_PROVIDER = "gemini"
DEFAULT_ENDPOINT = "https://api.openai.com/v1/chat/completions"
DEFAULT_DOMAIN = "robotics"

TRANSLATION_MAX_TOKENS = 2000
TRANSLATION_TEMPERATURE = 0.3
VALIDATION_MAX_TOKENS = 800
VALIDATION_TEMPERATURE = 0.2

REQUEST_TIMEOUT_SECONDS = 120
DEFAULT_CACHE_MAX_ENTRIES = 1024

API_KEY_ENV = "LLM_API_KEY"
MODEL_ENV = "TEXTBOOK_TRANS_MODEL"
PROVIDER_ENV = "TEXTBOOK_TRANS_PROVIDER"
ENDPOINT_ENV = "TEXTBOOK_TRANS_ENDPOINT"
