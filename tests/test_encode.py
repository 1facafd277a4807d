import random
import re

from htmlcode.encode import EncodingMode, encode, encode_no_spacing, encode_with_spacing

WITH = EncodingMode.WITH_SPACING
NO = EncodingMode.NO_SPACING

SAMPLES = [
    "O'Brien & Sons, Ltd. (UK)",
    "Price: 3.50/kg + VAT",
    "C:\\path_to\\file",
    '<a href="http://example.com">Shop</a>',
    "Wow!! Great; really",
    'He said "hi" and \'bye\'',
    "  spaced   out  -  text  ",
    '"Wrapped value"',
    "10.5 - 12.75 mm",
    "x &#44; y",
]

_REFERENCE = re.compile(r"&(?:#\d+|[a-z]+);")
_MAPPED = set(":+-,;/\\()!<>_.\"'")


def test_decimal_and_separator_dots_differ():
    assert encode("3.14", WITH) == "3&#69;14"
    assert encode("end.", WITH) == "end&#8901;"


def test_ampersand_passthrough():
    assert encode("A & B", WITH) == "A & B"
    assert encode("A&B", NO) == "A&B"


def test_quote_alternation():
    assert encode('"a" "b"', WITH) == "&ldquo;a&rdquo; &ldquo;b&rdquo;"


def test_single_and_double_quotes_alternate_independently():
    assert encode("\"a 'b' c\"x", NO) == "&ldquo;a&lsquo;b&rsquo;c&rdquo;x"


def test_link_gets_no_spacing():
    assert encode("http://x.com/a-b", NO) == "http&#58;&#47;&#47;x&#8901;com&#47;a&#45;b"


def test_no_spacing_unescapes_doubled_quotes_and_drops_whitespace():
    assert encode('a ""b', NO) == "a&ldquo;b"


def test_address_dot_is_spaced_once():
    assert encode("123 Main St. Suite 4", WITH) == "123 Main St&#8901; Suite 4"


def test_spacing_policies():
    assert encode("a,b", WITH) == "a&#44; b"
    assert encode("a-b", WITH) == "a &#45; b"
    assert encode("a + b", WITH) == "a &#43; b"
    assert encode("f(x)y", WITH) == "f &#40;x&#41; y"
    assert encode("a/b_c\\d", WITH) == "a&#47;b&#95;c&#92;d"
    assert encode("1<2>0", WITH) == "1 &#60;2&#62; 0"


def test_existing_space_is_not_doubled():
    assert encode("a , b", WITH) == "a &#44; b"
    assert encode("Wow!! Great", WITH) == "Wow&#33; &#33; Great"


def test_enclosing_quotes_are_stripped_unless_kept():
    assert encode('"Acme"', WITH) == "Acme"
    assert encode('"Acme"', WITH, keep_quotes=True) == "&ldquo;Acme&rdquo;"


def test_empty_inputs():
    assert encode("", WITH) == ""
    assert encode("   ", NO) == ""
    assert encode(None, WITH) == ""
    assert encode('""', WITH) == ""


def test_existing_references_are_left_alone():
    assert encode("x &#44; y", WITH) == "x &#44; y"
    assert encode("&ldquo;q&rdquo;", NO) == "&ldquo;q&rdquo;"


def test_idempotent():
    for mode in (WITH, NO):
        for sample in SAMPLES:
            once = encode(sample, mode)
            assert encode(once, mode) == once, (mode, sample)


def test_no_raw_mapped_characters_remain():
    for mode in (WITH, NO):
        for sample in SAMPLES:
            bare = _REFERENCE.sub("", encode(sample, mode))
            assert not (_MAPPED & set(bare)), (mode, sample, bare)


def test_mode_spacing_guarantees():
    for sample in SAMPLES:
        assert " " not in encode(sample, NO)
        assert "  " not in encode(sample, WITH)


def test_wrappers_match_modes():
    assert encode_with_spacing("a,b") == encode("a,b", WITH)
    assert encode_no_spacing("a, b") == "a&#44;b"


def _random_ascii(count, seed=1729):
    rng = random.Random(seed)
    alphabet = [chr(c) for c in range(32, 127)]
    return ["".join(rng.choice(alphabet) for _ in range(rng.randint(0, 40))) for _ in range(count)]


def test_random_printable_ascii_properties():
    for mode in (WITH, NO):
        for sample in _random_ascii(2000):
            once = encode(sample, mode)
            assert encode(once, mode) == once, (mode, sample)
            assert not (_MAPPED & set(_REFERENCE.sub("", once))), (mode, sample, once)
