import pytest

from nearby.names import is_valid_name, name_rejection_reason, resolve_display_name


def test_resolve_display_name_preference_order():
    assert resolve_display_name({"name": "A", "operator": "B", "brand": "C", "amenity": "D"}) == "A"
    assert resolve_display_name({"operator": "B", "brand": "C", "amenity": "D"}) == "B"
    assert resolve_display_name({"brand": "C", "amenity": "D"}) == "C"
    assert resolve_display_name({"amenity": "pharmacy"}) == "pharmacy"
    assert resolve_display_name({"highway": "bus_stop"}) == "Unknown"


def test_resolve_display_name_skips_empty_values():
    assert resolve_display_name({"name": "", "operator": "NHS"}) == "NHS"


@pytest.mark.parametrize(
    "name, reason",
    [
        ("", "empty"),
        (None, "empty"),
        ("A", "length"),
        ("x" * 101, "length"),
        ("Test Clinic 123", "blacklisted"),
        ("Contest Hall School", "blacklisted"),
        ("Old Library (closed)", "blacklisted"),
        ("Unnamed road stop", "blacklisted"),
        ("Building", "generic"),
        ("  SITE ", "generic"),
        ("42", "no_letters"),
        ("#-+ 7", "no_letters"),
    ],
)
def test_name_rejection_reasons(name, reason):
    assert name_rejection_reason(name) == reason
    assert not is_valid_name(name)


@pytest.mark.parametrize(
    "name",
    ["St Thomas Hospital", "Boots", "Bus Stop 4B", "a" * 100, "Unknown", "École Jules Ferry", "Site Lane Clinic"],
)
def test_valid_names(name):
    assert is_valid_name(name)
