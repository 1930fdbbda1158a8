import pytest

from nearby.categories import CATEGORY_INFO, CLASSIFICATION_RULES, classify, matching_rule


@pytest.mark.parametrize(
    "tags, expected",
    [
        ({"amenity": "hospital"}, "healthcare"),
        ({"amenity": "doctors"}, "healthcare"),
        ({"healthcare": "dentist"}, "healthcare"),
        ({"amenity": "bus_station"}, "transport"),
        ({"highway": "bus_stop"}, "transport"),
        ({"public_transport": "platform"}, "transport"),
        ({"railway": "station"}, "transport"),
        ({"amenity": "kindergarten"}, "education"),
        ({"amenity": "restaurant"}, None),
        ({"railway": "halt"}, None),
        ({}, None),
    ],
)
def test_classify(tags, expected):
    assert classify(tags) == expected


def test_first_matching_rule_wins():
    # A school that also carries a railway station tag is transport: rule 5 precedes rule 6.
    tags = {"amenity": "school", "railway": "station"}
    assert classify(tags) == "transport"
    assert matching_rule(tags).name == "railway_station"


def test_healthcare_beats_public_transport():
    tags = {"healthcare": "clinic", "public_transport": "platform"}
    assert classify(tags) == "healthcare"


def test_empty_healthcare_value_does_not_match():
    assert classify({"healthcare": ""}) is None


def test_rule_order_is_explicit():
    assert [r.name for r in CLASSIFICATION_RULES] == [
        "healthcare_amenity",
        "healthcare_tag",
        "bus_station",
        "bus_stop",
        "railway_station",
        "education_amenity",
    ]


def test_every_rule_targets_a_known_category():
    assert {r.category for r in CLASSIFICATION_RULES} == set(CATEGORY_INFO)
