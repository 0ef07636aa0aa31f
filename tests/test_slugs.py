from postsync.services.slugs import (
    calculate_read_time,
    ensure_unique,
    generate_slug,
    slugify,
)


# --- slugify -------------------------------------------------------------------


def test_slugify_lowercases_and_hyphenates():
    assert slugify("Hello World") == "hello-world"


def test_slugify_collapses_punctuation_runs_and_trims_edges():
    assert slugify("  --Hello,   World!!  ") == "hello-world"


def test_slugify_strips_quotes_without_splitting_words():
    assert slugify("Mom's \"Favorite\" Songs") == "moms-favorite-songs"


def test_slugify_treats_case_and_punctuation_variants_as_colliding():
    assert slugify("Hello World") == slugify("hello world!")


def test_slugify_non_ascii_letters_become_separators():
    assert slugify("Café Life") == "caf-life"


def test_slugify_empty_and_none():
    assert slugify("") == ""
    assert slugify(None) == ""
    assert slugify("!!!") == ""


def test_slugify_is_deterministic():
    assert slugify("BTS: Yet To Come") == slugify("BTS: Yet To Come") == "bts-yet-to-come"


# --- ensure_unique ---------------------------------------------------------------


def test_ensure_unique_returns_base_when_free():
    assert ensure_unique("post", ["other"]) == "post"


def test_ensure_unique_appends_first_free_suffix():
    assert ensure_unique("post", ["post", "post-2"]) == "post-3"


def test_ensure_unique_starts_at_two():
    assert ensure_unique("post", ["post"]) == "post-2"


def test_ensure_unique_fills_gaps_deterministically():
    existing = {"post", "post-3"}
    assert ensure_unique("post", existing) == "post-2"
    assert ensure_unique("post", existing) == "post-2"


def test_ensure_unique_is_case_insensitive():
    assert ensure_unique("post", ["POST"]) == "post-2"


# --- editor helpers ----------------------------------------------------------


def test_generate_slug_keeps_word_characters():
    assert generate_slug("Hello, World_again  now") == "hello-world-again-now"
    assert generate_slug("") == ""


def test_calculate_read_time_counts_words_without_tags():
    content = "<p>" + " ".join(["word"] * 401) + "</p>"
    assert calculate_read_time(content) == "3 min read"


def test_calculate_read_time_minimum_is_one_minute():
    assert calculate_read_time("") == "1 min read"
    assert calculate_read_time("<p>short</p>") == "1 min read"
