from dataclasses import dataclass, field
from typing import Optional

import pytest

from uri_templates import (
    DefaultVarExploder,
    ResolutionError,
    UriVar,
    parse,
    uri_transient,
    uri_var,
    var_name,
)
from uri_templates.core.explode.exploder import explode


@dataclass
class Address:
    city: str
    state: str
    zip_code: Optional[str] = field(default=None, metadata=uri_var(name="zip"))
    secret: str = field(default="hidden", metadata=uri_var(transient=True))
    _internal: str = "x"


class Person:
    def __init__(self, first: str, last: str, password: str) -> None:
        self._first = first
        self._last = last
        self._password = password

    @property
    def first(self) -> str:
        return self._first

    @property
    @var_name("surname")
    def last(self) -> str:
        return self._last

    @property
    @uri_transient
    def password(self) -> str:
        return self._password

    @property
    def nickname(self) -> Optional[str]:
        return None


class Account:
    __uri_fields__ = {"owner": UriVar(name="holder"), "token": UriVar(transient=True)}

    def __init__(self, owner: str) -> None:
        self._owner = owner

    @property
    @var_name("user")
    def owner(self) -> str:
        return self._owner

    @property
    def token(self) -> str:
        return "t0k3n"


class Point:
    def name_value_pairs(self):
        return {"x": 1, "y": 2}


class Broken:
    @property
    def value(self) -> str:
        raise RuntimeError("boom")


def test_dataclass_address_explodes_into_query():
    a = Address(city="Newport Beach", state="CA")
    assert parse("/mapper{?address*}").expand(address=a) == "/mapper?city=Newport%20Beach&state=CA"


def test_field_rename_and_transient():
    a = Address(city="Irvine", state="CA", zip_code="92618")
    assert DefaultVarExploder(a).name_value_pairs() == {
        "city": "Irvine",
        "state": "CA",
        "zip": "92618",
    }


def test_host_object_without_explode_is_one_unit():
    a = Address(city="Newport Beach", state="CA")
    assert parse("{?address}").expand(address=a) == "?address=city,Newport%20Beach,state,CA"


def test_getter_markers_and_none_values():
    p = Person("Ann", "Lee", "pw")
    assert DefaultVarExploder(p).name_value_pairs() == {"first": "Ann", "surname": "Lee"}


def test_field_markers_win_over_getter_markers():
    assert DefaultVarExploder(Account("bob")).name_value_pairs() == {"holder": "bob"}


def test_plain_attributes_are_used_for_plain_objects():
    class Bag:
        def __init__(self) -> None:
            self.a = "1"
            self.b = None
            self._c = "3"

    assert explode(Bag()) == {"a": "1"}


def test_plain_attributes_come_before_properties():
    class Page:
        def __init__(self) -> None:
            self.size = 20
            self._number = 2

        @property
        def number(self):
            return self._number

    assert list(explode(Page()).items()) == [("size", 20), ("number", 2)]
    assert parse("{?p*}").expand(p=Page()) == "?size=20&number=2"


def test_var_exploder_protocol_is_used_directly():
    assert parse("{;p*}").expand(p=Point()) == ";x=1;y=2"


def test_classes_and_callables_are_not_explodable():
    with pytest.raises(ResolutionError) as ei:
        DefaultVarExploder(Address)
    assert ei.value.code == "E_NOT_EXPLODABLE"
    with pytest.raises(ResolutionError):
        DefaultVarExploder(lambda: None)


def test_failing_getter_is_reported():
    with pytest.raises(ResolutionError) as ei:
        explode(Broken())
    assert ei.value.code == "E_EXPLODE_FAILED"
    assert isinstance(ei.value.__cause__, RuntimeError)


def test_empty_object_has_no_values():
    with pytest.raises(ResolutionError) as ei:
        explode(object())
    assert ei.value.code == "E_NO_VALUES"
