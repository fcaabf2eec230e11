import enum

class Language(str, enum.Enum):
    """Enumeration for supported languages, valued by their ISO 639-1 code."""
    ENGLISH = "en"
    URDU = "ur"
    FRENCH = "fr"
    GERMAN = "de"
    SPANISH = "es"
    ARABIC = "ar"
    HINDI = "hi"

    def get_display_name(self) -> str:
        """Returns the human readable name used inside prompts."""
        return _DISPLAY_NAMES[self]

    @classmethod
    def from_str(cls, s: str) -> 'Language':
        for lang_member in cls:
            if lang_member.value.lower() == s.lower() or lang_member.get_display_name().lower() == s.lower():
                return lang_member
        raise ValueError(f"'{s}' is not a valid Language")

    def __str__(self) -> str:
        return self.value


_DISPLAY_NAMES = {
    Language.ENGLISH: "English",
    Language.URDU: "Urdu",
    Language.FRENCH: "French",
    Language.GERMAN: "German",
    Language.SPANISH: "Spanish",
    Language.ARABIC: "Arabic",
    Language.HINDI: "Hindi",
}


class ContentType(str, enum.Enum):
    """
    Enumeration for the kinds of fields handed to the translation service
    """
    Prose = "prose"
    Title = "title"
    Comment = "comment"
    Caption = "equation-adjacent-caption"

    def __str__(self) -> str:
        return self.value

class SpanCategory(str, enum.Enum):
    """Protected span categories, listed in detection order."""
    Code = "CODE"
    Equation = "EQUATION"
    Image = "IMAGE"
    Diagram = "DIAGRAM"
