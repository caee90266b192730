"""
Tests for demangler.
"""

from dataclasses import dataclass

from rust_demangler import (
    DecodedName,
    Escape,
    LegacyDemangler,
    decode,
    demangle,
    parse,
    render,
)


@dataclass
class CaseData:
    input: str
    expected: str
    expected_no_hash: str

    def test(self):
        """
        Run the demangler on the input and verify output matches in both modes.
        """
        try:
            name = parse(self.input)
        except Exception as e:
            raise AssertionError(f"Failed on input `{self.input}`") from e

        for include_hash, expected in [(True, self.expected), (False, self.expected_no_hash)]:
            actual = render(name, include_hash)
            assert expected == actual, (
                "\n"
                f"Input:    {self.input}\n"
                f"Hash:     {include_hash}\n"
                f"Expected: {expected}\n"
                f"Actual:   {actual}\n"
            )


def assert_unchanged(symbol: str):
    assert decode(symbol) is None, f"Expected `{symbol}` to be left unchanged"
    assert demangle(symbol) == symbol
    assert demangle(symbol, include_hash=False) == symbol


def test_basic():
    """
    Test plain paths with a trailing hash.
    """
    test_data = [
        CaseData(
            input="_ZN7example4main17h0db00b8b32acffd5E",
            expected="example::main::h0db00b8b32acffd5",
            expected_no_hash="example::main",
        ),
        CaseData(
            input="_ZN3std2io5stdio6_print17he48522be5b0a80d9E",
            expected="std::io::stdio::_print::he48522be5b0a80d9",
            expected_no_hash="std::io::stdio::_print",
        ),
        CaseData(
            input="_ZN3foo17h05af221e174051e9E",
            expected="foo::h05af221e174051e9",
            expected_no_hash="foo",
        ),
        CaseData(
            input="_ZN3std11collections4hash3map11RandomState3new4KEYS7__getit5__KEY17h1bc0dbd302b9f01bE",
            expected="std::collections::hash::map::RandomState::new::KEYS::__getit::__KEY::h1bc0dbd302b9f01b",
            expected_no_hash="std::collections::hash::map::RandomState::new::KEYS::__getit::__KEY",
        ),
        CaseData(input="_ZN3foo3barE", expected="foo::bar", expected_no_hash="foo::bar"),
        CaseData(input="_ZN1aE", expected="a", expected_no_hash="a"),
        # Leading zeros in a length field are just part of the number.
        CaseData(input="_ZN03foo3barE", expected="foo::bar", expected_no_hash="foo::bar"),
    ]

    for test in test_data:
        test.test()


def test_bare_prefix():
    """
    Test symbols whose leading underscore was stripped by the symbol table.
    """
    test_data = [
        CaseData(
            input="ZN7example4main17h0db00b8b32acffd5E",
            expected="example::main::h0db00b8b32acffd5",
            expected_no_hash="example::main",
        ),
        CaseData(input="ZN1aE", expected="a", expected_no_hash="a"),
    ]

    for test in test_data:
        test.test()


def test_escapes():
    """
    Test segments containing escape markers.
    """
    test_data = [
        CaseData(
            input="_ZN55_$LT$$RF$$u27$a$u20$T$u20$as$u20$core..fmt..Display$GT$3fmt17h510ed05e72307174E",
            expected="_<&'a T as core..fmt..Display>::fmt::h510ed05e72307174",
            expected_no_hash="_<&'a T as core..fmt..Display>::fmt",
        ),
        CaseData(
            input="_ZN84_$LT$core..iter..Map$LT$I$C$$u20$F$GT$$u20$as$u20$core..iter..iterator..Iterator$GT$4next17h98ea4751a6975428E",
            expected="_<core..iter..Map<I, F> as core..iter..iterator..Iterator>::next::h98ea4751a6975428",
            expected_no_hash="_<core..iter..Map<I, F> as core..iter..iterator..Iterator>::next",
        ),
        CaseData(
            input="_ZN51_$LT$serde_json..read..IteratorRead$LT$Iter$GT$$GT$15parse_str_bytes17h8199b7867f1a334fE",
            expected="_<serde_json..read..IteratorRead<Iter>>::parse_str_bytes::h8199b7867f1a334f",
            expected_no_hash="_<serde_json..read..IteratorRead<Iter>>::parse_str_bytes",
        ),
        CaseData(
            input="_ZN8$SP$$BP$8$LP$$RP$10$u5b$$u5d$6$u7e$xE",
            expected="@*::()::[]::~x",
            expected_no_hash="@*::()::[]::~x",
        ),
    ]

    for test in test_data:
        test.test()


def test_hash_lookalikes():
    """
    Test final segments which resemble, but are not, a hash suffix.
    """
    test_data = [
        # Too short.
        CaseData(input="_ZN3foo5h05afE", expected="foo::h05af", expected_no_hash="foo::h05af"),
        # Too long.
        CaseData(
            input="_ZN3foo20h05af221e174051e9abcE",
            expected="foo::h05af221e174051e9abc",
            expected_no_hash="foo::h05af221e174051e9abc",
        ),
        # Uppercase hex digits.
        CaseData(
            input="_ZN3foo17h05AF221E174051E9E",
            expected="foo::h05AF221E174051E9",
            expected_no_hash="foo::h05AF221E174051E9",
        ),
        # Not the last segment.
        CaseData(
            input="_ZN3foo17h05af221e174051e93barE",
            expected="foo::h05af221e174051e9::bar",
            expected_no_hash="foo::h05af221e174051e9::bar",
        ),
        # The only segment.
        CaseData(
            input="_ZN17h05af221e174051e9E",
            expected="h05af221e174051e9",
            expected_no_hash="",
        ),
    ]

    for test in test_data:
        test.test()


def test_hash_is_tagged():
    name = parse("_ZN7example4main17h0db00b8b32acffd5E")
    assert name.segments == ["example", "main"]
    assert name.hash == "h0db00b8b32acffd5"
    assert str(name) == "example::main::h0db00b8b32acffd5"

    name = parse("_ZN3foo5h05afE")
    assert name.segments == ["foo", "h05af"]
    assert name.hash is None

    name = parse("_ZN17h05af221e174051e9E")
    assert name.segments == []
    assert name.hash == "h05af221e174051e9"
    assert demangle("_ZN17h05af221e174051e9E", include_hash=False) == ""
    assert demangle("_ZN17h05af221e174051e9E") == "h05af221e174051e9"


def test_unknown_escape():
    """
    An unknown marker keeps the rest of its segment verbatim, but does not affect
    the following segments.
    """
    test_data = [
        CaseData(
            input="_ZN8a$XX$$C$4$LT$E",
            expected="a$XX$$C$::<",
            expected_no_hash="a$XX$$C$::<",
        ),
        CaseData(
            input="_ZN13$LT$T$XX$b$C$3fooE",
            expected="<T$XX$b$C$::foo",
            expected_no_hash="<T$XX$b$C$::foo",
        ),
        CaseData(input="_ZN2a$E", expected="a$", expected_no_hash="a$"),
    ]

    for test in test_data:
        test.test()


def test_escape_order():
    """
    Markers which share a prefix are resolved by table order.
    """
    table = [Escape("$a$", "1"), Escape("$a$b", "2")]
    assert str(LegacyDemangler(table).parse("_ZN5$a$bcE")) == "1bc"

    table = [Escape("$a$b", "2"), Escape("$a$", "1")]
    assert str(LegacyDemangler(table).parse("_ZN5$a$bcE")) == "2c"


def test_explicit_terminator():
    """
    A zero length field is only valid as the very last element.
    """
    CaseData(input="_ZN3foo0E", expected="foo", expected_no_hash="foo").test()
    CaseData(
        input="_ZN3foo17h05af221e174051e90E",
        expected="foo::h05af221e174051e9",
        expected_no_hash="foo",
    ).test()

    assert_unchanged("_ZN3foo0xbarE")
    assert_unchanged("_ZN0E")
    assert_unchanged("_ZN00E")


def test_invalid():
    """
    Test symbols which are left unchanged.
    """
    test_data = [
        # Not mangled at all.
        "main",
        "",
        "printf@PLT",
        # Wrong or missing delimiters.
        "_ZN3foo",
        "_Z3foov",
        "3fooE",
        "_ZN3foo3barEE",
        # Too short to hold anything.
        "_ZNE",
        "ZNE",
        "_ZN",
        # Length fields that don't match the segments.
        "_ZN10fooE",
        "_ZN3foE",
        "_ZN3foo3E",
        "_ZN3foo99999999999999999999999E",
        "_ZNfooE",
        "_ZN3foo.barE",
        # Non-ASCII digits are not length fields.
        "_ZN٣fooE",
        # Newer scheme.
        "_RNvNtNtCs1234_7mycrate3foo3bar3baz",
    ]

    for symbol in test_data:
        assert_unchanged(symbol)


def test_no_partial_output():
    """
    A bad length field anywhere discards the whole symbol, even after escapes which
    would have decoded on their own.
    """
    assert_unchanged("_ZN4$LT$4$GT$9fooE")
    assert_unchanged("_ZN4$LT$4$GT$xE")


def test_demangler_is_a_decoder():
    decoder = LegacyDemangler()
    assert decoder("_ZN3foo3barE") == DecodedName(segments=["foo", "bar"])
    assert decoder("not mangled") is None
