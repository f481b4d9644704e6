# util/functions.py
import httpx


def clip_words(text: str, max_words: int = 30) -> str:
    """
    - Trim 'text' to at most `max_words` tokens separated by whitespace.
    - Adds an ellipsis when trimming occurs.
    """
    words = text.split()
    if len(words) <= max_words:
        return text
    return " ".join(words[:max_words]) + " …"


def clamp(value: float, low: float = 0.0, high: float = 1.0) -> float:
    return max(low, min(high, value))


def join_url(base: str, path: str) -> str:
    """
    Append `path` to the path of `base`, keeping exactly one slash between
    them. Query and fragment of `base` stay where they are; `path` must
    already be percent-escaped.
    """
    url = httpx.URL(base)
    joined = url.path.rstrip("/") + "/" + path.lstrip("/")
    return str(url.copy_with(path=joined))
