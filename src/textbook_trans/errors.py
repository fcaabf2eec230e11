from typing import Optional

# Base Exception
class TextbookTranslationError(Exception):
    """Base exception for the textbook translation pipeline."""
    pass

# Span Errors
class SpanProtectionError(TextbookTranslationError):
    """A generated placeholder token already occurs verbatim in the document."""
    def __init__(self, message: str, token: Optional[str] = None):
        super().__init__(message)
        self.token = token

class SpanRestorationError(TextbookTranslationError):
    """A placeholder token could not be resolved after translation."""
    def __init__(self, message: str, token: Optional[str] = None, field_name: Optional[str] = None):
        super().__init__(message)
        self.token = token
        self.field_name = field_name

# Service Errors
class TranslationServiceError(TextbookTranslationError):
    """Generic error during the generation call or while parsing its reply."""
    def __init__(self, message: str, original_exception: Optional[Exception] = None):
        super().__init__(message)
        self.original_exception = original_exception

# Terminology Errors
class TerminologyLookupError(TextbookTranslationError):
    """The terminology dictionary could not be loaded."""
    def __init__(self, message: str, original_exception: Optional[Exception] = None):
        super().__init__(message)
        self.original_exception = original_exception

# Config Errors
class ConfigError(TextbookTranslationError):
    """Errors related to loading the translator configuration."""
    def __init__(self, message: str, original_exception: Optional[Exception] = None):
        super().__init__(message)
        self.original_exception = original_exception
