from urllib.parse import quote, urlparse, urlunparse


def encode_url_path(file_url: str) -> str:
    """Encode URL path to handle special characters like spaces and non-ASCII names.
    Existing %-escapes are kept, so URLs built by join_url pass through unchanged."""
    parsed = urlparse(file_url)
    encoded_path = quote(parsed.path, safe="/%")
    return urlunparse(parsed._replace(path=encoded_path))


def join_url(base_url: str, *segments: str) -> str:
    """Join path segments onto a base URL, encoding each segment."""
    base = base_url.rstrip("/")
    tail = "/".join(quote(s.strip("/"), safe="") for s in segments if s)
    return f"{base}/{tail}" if tail else base


def is_image_type(content_type: str | None) -> bool:
    return content_type is not None and content_type.lower().startswith("image/")
