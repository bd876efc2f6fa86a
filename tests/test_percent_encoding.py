from uri_templates.core.encode.percent import encode, encode_literal


def test_unreserved_passes_through_both_profiles():
    s = "AZaz09-._~"
    assert encode(s) == s
    assert encode(s, preserve_reserved=True) == s


def test_strict_profile_encodes_reserved():
    assert encode(":/?#[]@!$&'()*+,;=") == "%3A%2F%3F%23%5B%5D%40%21%24%26%27%28%29%2A%2B%2C%3B%3D"


def test_reserved_profile_keeps_reserved():
    assert encode("http://example.com/a?b=c#d", preserve_reserved=True) == "http://example.com/a?b=c#d"


def test_space_is_encoded_in_both_profiles():
    assert encode("a b") == "a%20b"
    assert encode("a b", preserve_reserved=True) == "a%20b"


def test_existing_triplets_only_survive_reserved_profile():
    assert encode("%41%2f", preserve_reserved=True) == "%41%2f"
    assert encode("%41") == "%2541"


def test_bare_percent_is_encoded():
    assert encode("50%", preserve_reserved=True) == "50%25"
    assert encode("%4G", preserve_reserved=True) == "%254G"


def test_multibyte_code_points_become_utf8_triplets():
    assert encode("é") == "%C3%A9"
    assert encode("漢") == "%E6%BC%A2"
    assert encode("😀") == "%F0%9F%98%80"


def test_literal_profile():
    assert encode_literal("/a b/café?x=%20") == "/a%20b/caf%C3%A9?x=%20"
