import pytest

from runic.cvar import DEFAULT_DESCRIPTION, CVar, CVarDescriptor


def test_defaults_use_placeholder_description():
    cvar = CVar("r_width", 640)
    assert cvar.description == "We are under construction here! Pardon the mess!"
    assert cvar.description == DEFAULT_DESCRIPTION
    assert cvar.archive is False
    assert cvar.modified is False


def test_value_is_stored_as_float():
    cvar = CVar("r_width", 640)
    assert cvar.value == 640.0
    assert isinstance(cvar.value, float)


def test_set_marks_modified_and_read_clears_it():
    cvar = CVar("gamma", 1.0)
    cvar.set(2.2)
    assert cvar.modified is True
    assert cvar.read() == pytest.approx(2.2)
    assert cvar.modified is False


def test_read_without_change_returns_value():
    cvar = CVar("gamma", 1.5, True, "Display gamma")
    assert cvar.read() == 1.5
    assert cvar.modified is False


def test_describe_appends_current_value():
    cvar = CVar("gamma", 2.5, True, "Display gamma")
    assert cvar.describe() == "Display gamma\n Current Value: 2.500000"


def test_describe_reflects_new_value():
    cvar = CVar("fov", 90, False, "Field of view")
    cvar.set(45)
    assert cvar.describe().endswith("Current Value: 45.000000")


def test_modified_not_part_of_equality():
    first = CVar("a", 1.0)
    second = CVar("a", 1.0)
    second.set(1.0)
    assert first == second


def test_descriptor_defaults():
    descriptor = CVarDescriptor()
    assert descriptor.name == ""
    assert descriptor.description == ""
    assert descriptor.value == 0.0
    assert descriptor.default_value == 0.0
    assert descriptor.archivable is False