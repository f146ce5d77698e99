"""Area: names, measure merging and display rules."""
import pytest

from bethyw.data.area import Area
from bethyw.data.errors import NotFoundError
from bethyw.data.measure import Measure


def test_names_are_stored_by_lowercase_language():
    area = Area("W06000023")
    area.set_name("ENG", "Powys")

    assert area.names == {"eng": "Powys"}
    assert area.get_name("eng") == "Powys"
    assert area.get_name("Eng") == "Powys"
    assert area.has_name("ENG")
    assert not area.has_name("cym")


def test_get_name_missing_language():
    area = Area("W06000023")
    with pytest.raises(NotFoundError, match="Language not found"):
        area.get_name("cym")


def test_set_measure_merges_existing_measure():
    area = Area("W06000023")
    first = Measure("Pop", "Population")
    first.set_value(1999, 1.0)
    first.set_value(2000, 2.0)
    area.set_measure("Pop", first)

    second = Measure("pop", "Something else")
    second.set_value(2000, 20.0)
    second.set_value(2001, 30.0)
    area.set_measure("POP", second)

    assert len(area) == 1
    merged = area.get_measure("pop")
    assert merged.series == {1999: 1.0, 2000: 20.0, 2001: 30.0}
    assert merged.label == "Population"


def test_get_measure_is_case_insensitive_but_reports_key_as_given():
    area = Area("W06000023")
    measure = Measure("pop", "Population")
    area.set_measure("Pop", measure)

    assert area.get_measure("POP") is measure
    with pytest.raises(NotFoundError, match="No measure found matching DENS"):
        area.get_measure("DENS")


@pytest.mark.parametrize(
    "names, expected",
    [
        ({}, "Unnamed"),
        ({"eng": "Powys"}, "Powys"),
        ({"eng": "Powys", "cym": "Powys"}, "Powys / Powys"),
        ({"cym": "Abertawe", "eng": "Swansea"}, "Swansea / Abertawe"),
        ({"eng": "Swansea", "fra": "Swansea (fr)"}, "Swansea"),
    ],
)
def test_display_name(names, expected):
    area = Area("W06000011")
    for lang, name in names.items():
        area.set_name(lang, name)

    assert area.display_name() == expected
    assert str(area).splitlines()[0] == expected


def test_str_without_measures():
    area = Area("W06000023")
    area.set_name("eng", "Powys")

    assert str(area).splitlines() == [
        "Powys",
        "Local authority code: W06000023",
        "<no measures>",
    ]


def test_str_lists_measures_by_code():
    area = Area("W06000023")
    area.set_measure("pop", Measure("pop", "Population"))
    area.set_measure("dens", Measure("dens", "Population density"))

    text = str(area)
    assert text.index("Population density (dens)") < text.index("Population (pop)")


def test_equality_is_structural():
    a = Area("W06000023")
    b = Area("W06000023")
    a.set_name("eng", "Powys")
    b.set_name("eng", "Powys")
    assert a == b

    b.set_measure("pop", Measure("pop", "Population"))
    assert a != b
    assert Area("W06000023") != Area("W06000024")
