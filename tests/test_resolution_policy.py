import pytest

from uri_templates import ExpansionSettings, ResolutionError, parse

UNDEFINED = ExpansionSettings(on_resolution_error="undefined")


def test_abort_is_the_default():
    with pytest.raises(ResolutionError) as ei:
        parse("/a{?x,y}").expand(x=[["nested"]], y="1")
    err = ei.value
    assert err.code == "E_NESTED_COMPOSITE"
    assert err.expression == "{?x,y}"
    assert err.position == 2
    assert "'x'" in err.message


def test_undefined_policy_isolates_the_failing_variable():
    got = parse("/a{?x,y}{/z}").expand({"x": [["nested"]], "y": "1", "z": "p"}, settings=UNDEFINED)
    assert got == "/a?y=1/p"


def test_undefined_policy_suppresses_prefix_when_nothing_is_left():
    assert parse("/a{?x}").expand({"x": object()}, settings=UNDEFINED) == "/a"


def test_unexplodable_host_object_aborts():
    with pytest.raises(ResolutionError) as ei:
        parse("{?o*}").expand(o=object())
    assert ei.value.code == "E_NO_VALUES"


def test_map_with_composite_value_aborts():
    with pytest.raises(ResolutionError) as ei:
        parse("{?m*}").expand(m={"a": ["b"]})
    assert ei.value.code == "E_NESTED_COMPOSITE"


def test_unpaired_surrogate_aborts():
    with pytest.raises(ResolutionError) as ei:
        parse("{?x,y}").expand(x="a\ud800b", y="1")
    assert ei.value.code == "E_INVALID_UNICODE"
    assert ei.value.expression == "{?x,y}"


def test_unpaired_surrogate_in_list_and_keys_aborts():
    for value in (["ok", "\udfff"], {"\ud83d": "v"}):
        with pytest.raises(ResolutionError) as ei:
            parse("{x*}").expand(x=value)
        assert ei.value.code == "E_INVALID_UNICODE"


def test_undefined_policy_drops_unpaired_surrogate():
    got = parse("{?x,y}").expand({"x": "a\ud800b", "y": "1"}, settings=UNDEFINED)
    assert got == "?y=1"
