from postsync.services.media import (
    get_image_src,
    is_dropbox_url,
    normalize_dropbox_image_url,
    normalize_dropbox_shared_url,
    to_dropbox_proxy_url,
)

SHARED = "https://www.dropbox.com/scl/fi/abc/photo.jpg?rlkey=xyz&st=tok&dl=0"


# --- shared links ------------------------------------------------------------


def test_shared_url_dl_becomes_raw():
    assert normalize_dropbox_shared_url(SHARED) == (
        "https://www.dropbox.com/scl/fi/abc/photo.jpg?rlkey=xyz&st=tok&raw=1"
    )


def test_shared_url_adds_raw_when_missing():
    assert normalize_dropbox_shared_url("https://dropbox.com/s/abc/a.png") == (
        "https://dropbox.com/s/abc/a.png?raw=1"
    )


def test_shared_url_keeps_existing_raw_and_fragment():
    url = "https://www.dropbox.com/s/abc/a.png?raw=1#top"
    assert normalize_dropbox_shared_url(url) == url


def test_shared_url_ignores_other_hosts_and_proxy_urls():
    assert normalize_dropbox_shared_url("https://example.com/a.png?dl=0") == "https://example.com/a.png?dl=0"
    proxied = "/api/media/dropbox?url=https%3A%2F%2Fwww.dropbox.com%2Fa"
    assert normalize_dropbox_shared_url(proxied) == proxied


def test_shared_url_rejects_non_strings():
    assert normalize_dropbox_shared_url(None) == ""
    assert normalize_dropbox_shared_url(123) == ""


def test_shared_url_relative_paths_are_untouched():
    assert normalize_dropbox_shared_url("images/a.png") == "images/a.png"


# --- image urls --------------------------------------------------------------


def test_image_url_keeps_access_tokens():
    result = normalize_dropbox_image_url(f"  {SHARED}  ")

    assert "rlkey=xyz" in result
    assert "st=tok" in result
    assert "dl=" not in result
    assert result.endswith("raw=1")


def test_image_url_non_dropbox_is_trimmed_only():
    assert normalize_dropbox_image_url(" https://cdn.example/a.png ") == "https://cdn.example/a.png"
    assert normalize_dropbox_image_url("") == ""


def test_image_url_without_scheme_uses_string_rewrites():
    assert normalize_dropbox_image_url("dropbox.com/s/a.png?dl=1") == "dropbox.com/s/a.png?raw=1"
    assert normalize_dropbox_image_url("dropbox.com/s/a.png") == "dropbox.com/s/a.png?raw=1"


# --- display -----------------------------------------------------------------


def test_dropbox_images_are_proxied():
    assert is_dropbox_url(SHARED)
    assert get_image_src(SHARED) == to_dropbox_proxy_url(SHARED)
    assert get_image_src(SHARED).startswith("/api/media/dropbox?url=https%3A%2F%2Fwww.dropbox.com")


def test_other_images_pass_through():
    assert not is_dropbox_url("https://cdn.example/a.png")
    assert get_image_src(" https://cdn.example/a.png ") == "https://cdn.example/a.png"
    assert get_image_src(None) == ""
    assert to_dropbox_proxy_url("") == ""
