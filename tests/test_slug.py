import pytest

from blog_api.utils.slug import make_slug, STRIP_CHARACTERS


@pytest.mark.parametrize(
    "title, expected",
    [
        ("Hello, World!", "hello-world"),
        ("  Multiple   spaces\tand_tabs ", "multiple-spaces-and-tabs"),
        ("Don't stop (me) now", "dont-stop-me-now"),
        ("Price: $5 @ 50% off?", "price-5-50-off"),
        ("path/to|thing", "pathtothing"),
        ("ALL CAPS TITLE", "all-caps-title"),
    ],
)
def test_make_slug(title, expected):
    assert make_slug(title) == expected


def test_make_slug_empty():
    assert make_slug("") == ""
    assert make_slug(None) == ""


def test_make_slug_strips_every_listed_character():
    assert make_slug("a" + STRIP_CHARACTERS + "b") == "ab"


@pytest.mark.parametrize(
    "title",
    ["Hello, World!", "A.B.C  -- d", "Ünïcode Tïtle", "x" + STRIP_CHARACTERS, "already-a-slug"],
)
def test_make_slug_is_idempotent(title):
    once = make_slug(title)
    assert make_slug(once) == once


def test_make_slug_converts_non_string_titles():
    assert make_slug(123) == "123"
    assert make_slug(0) == "0"
