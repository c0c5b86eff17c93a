import pytest

from linemark.selector import InvalidSelectorError, SelectorKind, parse_selector


@pytest.mark.parametrize(
    "text",
    ["001", "001-200", "001-200-010", "100-200-300-400", "999", "001-001-001"],
)
def test_implicit_mp(text):
    sel = parse_selector(text)
    assert sel.kind is SelectorKind.MP
    assert sel.value == text


@pytest.mark.parametrize(
    "text",
    [
        "A3F7c9Qx7Lm2",
        "abcdefgh",
        "Abc123Def",
        "Abc123Def0",
        "Abc123Def01",
        "Abc123Def012",
        "123456789012",
        "ABCDEFGH",
    ],
)
def test_implicit_sid(text):
    sel = parse_selector(text)
    assert sel.kind is SelectorKind.SID
    assert sel.value == text


@pytest.mark.parametrize(
    "text, value",
    [
        ("mp:001", "001"),
        ("mp:001-200", "001-200"),
        ("mp:001-200-010", "001-200-010"),
        ("mp:999", "999"),
    ],
)
def test_explicit_mp(text, value):
    sel = parse_selector(text)
    assert sel.kind is SelectorKind.MP
    assert sel.value == value


@pytest.mark.parametrize(
    "text, value",
    [
        ("sid:A3F7c9Qx7Lm2", "A3F7c9Qx7Lm2"),
        ("sid:abcdefgh", "abcdefgh"),
        ("sid:123456789012", "123456789012"),
    ],
)
def test_explicit_sid(text, value):
    sel = parse_selector(text)
    assert sel.kind is SelectorKind.SID
    assert sel.value == value


@pytest.mark.parametrize("text", ["001", "001-200", "001-200-010"])
def test_mp_takes_precedence(text):
    assert parse_selector(text).kind is SelectorKind.MP


@pytest.mark.parametrize(
    "text",
    [
        "",
        "   ",
        "ab",
        "abc",
        "ABCDEFGHIJKLM",
        "abc!@#$efgh",
        "abc_defgh",
        "mp:",
        "mp:invalid",
        "mp:000",
        "mp:A3F7c9Qx7Lm2",
        "sid:",
        "sid:abc",
        "sid:abc!defgh",
        "sid:001-200",
        "foo:001-200",
        "001 200",
        "001\n200",
        "x:001",
    ],
)
def test_invalid(text):
    with pytest.raises(InvalidSelectorError):
        parse_selector(text)


@pytest.mark.parametrize(
    "text, expected",
    [
        ("001-200", "001-200"),
        ("A3F7c9Qx7Lm2", "A3F7c9Qx7Lm2"),
        ("mp:001-200", "mp:001-200"),
        ("sid:A3F7c9Qx7Lm2", "sid:A3F7c9Qx7Lm2"),
        ("001", "001"),
        ("mp:001", "mp:001"),
    ],
)
def test_str(text, expected):
    assert str(parse_selector(text)) == expected


@pytest.mark.parametrize(
    "text, explicit",
    [
        ("001-200", False),
        ("A3F7c9Qx7Lm2", False),
        ("mp:001-200", True),
        ("sid:A3F7c9Qx7Lm2", True),
        ("001", False),
        ("mp:001", True),
    ],
)
def test_explicit_flag(text, explicit):
    assert parse_selector(text).explicit is explicit


def test_surrounding_whitespace_is_trimmed():
    sel = parse_selector("  mp:001  ")
    assert (sel.kind, sel.value) == (SelectorKind.MP, "001")