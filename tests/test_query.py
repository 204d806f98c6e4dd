import pytest

from ebay_mcp.core.query import sanitize_query


@pytest.mark.parametrize(
    "raw, expected",
    [
        ("iphone 13 -cracked", "iphone 13"),
        ("lego AND technic NOT star wars", "lego technic star wars"),
        ("  nintendo   switch  ", "nintendo switch"),
        ("gpu OR -mining -broken rtx", "gpu rtx"),
        ("android -", "android"),
    ],
)
def test_sanitize_drops_operators_and_exclusions(raw, expected):
    assert sanitize_query(raw) == expected


def test_lowercase_words_are_not_operators():
    assert sanitize_query("salt and pepper") == "salt and pepper"


def test_exclusion_tokens_never_survive_when_other_terms_exist():
    out = sanitize_query("camera -broken -parts -repair lens")
    assert not any(t.startswith("-") for t in out.split())
    assert out == "camera lens"


def test_only_operators_falls_back_to_removing_exclusions():
    assert sanitize_query("AND -junk OR") == "AND OR"


def test_only_exclusions_falls_back_to_raw_input():
    assert sanitize_query("  -refurbished ") == "-refurbished"


@pytest.mark.parametrize("raw", ["", "   ", "\t\n"])
def test_blank_input_returns_empty(raw):
    assert sanitize_query(raw) == ""
