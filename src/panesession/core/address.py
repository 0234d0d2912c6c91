"""Address bar input handling for hosts."""

from urllib.parse import quote

from ..config import SEARCH_URL_TEMPLATE


def format_address(text: str) -> str:
    """Turn address bar input into a URL.

    - http:// and https:// input is kept as-is
    - input containing a dot is treated as a host and gets https://
    - anything else becomes a search query

    Args:
        text: Raw input

    Returns:
        URL to load
    """
    text = text.strip()
    if text.startswith(("http://", "https://")):
        return text
    if "." in text and " " not in text:
        return f"https://{text}"
    return SEARCH_URL_TEMPLATE.format(query=quote(text, safe=""))
