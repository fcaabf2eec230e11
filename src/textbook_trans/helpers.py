import hashlib
import re

JSON_MARKDOWN_REGEX = re.compile(r"```(?:json)?\s*([\s\S]*?)\s*```")


def calculate_checksum(contents: str) -> str:
    """
    Returns a checksum of the provided contents
    """
    return hashlib.sha256(contents.encode('utf-8')).hexdigest()


def extract_json_from_response(message: str) -> str:
    """
    Takes a model reply and returns the JSON object it carries.

    Models like to wrap the object in a ```json fence or to add a sentence
    before or after it, so the fence is unwrapped first and then everything
    outside the outermost braces is dropped.
    If no object can be located, the stripped message is returned as-is and
    the caller's parser reports the failure.
    """
    text = message.strip()
    fenced = JSON_MARKDOWN_REGEX.search(text)
    if fenced:
        text = fenced.group(1).strip()

    start_idx = text.find("{")
    end_idx = text.rfind("}")
    if start_idx == -1 or end_idx < start_idx:
        return text
    return text[start_idx:end_idx + 1]
