"""Helpers for Dropbox-hosted media links."""

from urllib.parse import parse_qsl, quote, urlencode, urlsplit, urlunsplit

DROPBOX_HOSTS = ("dropbox.com", "www.dropbox.com")
PROXY_PATH = "/api/media/dropbox"


def is_dropbox_url(url) -> bool:
    """Check whether a URL points at Dropbox."""
    if not url:
        return False
    return "dropbox.com" in str(url)


def to_dropbox_proxy_url(url) -> str:
    """Route a Dropbox URL through the site's media proxy."""
    if not url:
        return ""
    return f"{PROXY_PATH}?url={quote(str(url), safe='')}"


def _with_query(parts, params) -> str:
    return urlunsplit((parts.scheme, parts.netloc, parts.path, urlencode(params), parts.fragment))


def normalize_dropbox_shared_url(input_url) -> str:
    """
    Rewrite a Dropbox shared link so it renders inline.

    Only dropbox.com hosts are touched, proxy URLs are returned as-is, an
    existing ``raw=1`` is kept and ``dl`` is replaced by ``raw=1``. Other
    query parameters and the fragment are preserved.
    """
    if not input_url or not isinstance(input_url, str):
        return ""
    if PROXY_PATH in input_url:
        return input_url

    parts = urlsplit(input_url)
    if not parts.scheme or (parts.hostname or "").lower() not in DROPBOX_HOSTS:
        return input_url

    params = parse_qsl(parts.query, keep_blank_values=True)
    if ("raw", "1") in params:
        return input_url

    has_dl = any(k == "dl" for k, _ in params)
    has_raw = any(k == "raw" for k, _ in params)
    if has_dl:
        params = [(k, v) for k, v in params if k != "dl"]
        params = [(k, v) for k, v in params if k != "raw"] + [("raw", "1")]
        return _with_query(parts, params)
    if not has_raw:
        return _with_query(parts, params + [("raw", "1")])
    return input_url


def normalize_dropbox_image_url(url) -> str:
    """
    Normalize a Dropbox image URL before it is stored.

    Drops ``dl`` and forces ``raw=1`` while keeping the ``st`` and ``rlkey``
    access tokens. Non-Dropbox URLs are only trimmed.
    """
    if not url:
        return ""
    value = str(url).strip()
    if "dropbox.com" not in value:
        return value

    parts = urlsplit(value)
    if parts.scheme and parts.netloc:
        params = [(k, v) for k, v in parse_qsl(parts.query, keep_blank_values=True)
                  if k not in ("dl", "raw")]
        params.append(("raw", "1"))
        return _with_query(parts, params)

    # Not an absolute URL: plain string rewrites
    value = value.replace("dl=0", "raw=1").replace("dl=1", "raw=1")
    if "raw=1" not in value:
        separator = "&" if "?" in value else "?"
        value = f"{value}{separator}raw=1"
    return value


def get_image_src(stored_url) -> str:
    """Resolve a stored image URL to something an ``<img>`` can load."""
    if not stored_url:
        return ""
    value = str(stored_url).strip()
    if is_dropbox_url(value):
        return to_dropbox_proxy_url(value)
    return value
