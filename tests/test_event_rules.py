"""
Tests for the event-type rule tables
"""

import json

import pytest

from planning.core.event_rules import DEFAULT_RULES, build_rules, load_rules


@pytest.fixture
def rules():
    return build_rules(DEFAULT_RULES)


def test_compatibility_table_is_symmetric(rules):
    """If A may overlap B then B may overlap A"""
    for name in rules.types:
        for other in rules.compatible[name]:
            assert rules.can_overlap(other, name), f"{other} -> {name}"


def test_canonical_rows(rules):
    assert rules.compatible["show"] == {"permanence", "ticketing", "regie"}
    assert rules.compatible["rental"] == {"permanence", "ticketing", "regie"}
    assert rules.compatible["permanence"] == {"show", "ticketing", "regie", "rental", "calage", "event"}
    assert not rules.can_overlap("show", "show")
    assert not rules.can_overlap("calage", "rental")


def test_symmetrized_by_union():
    """A one-sided declaration is enough for both directions"""
    rules = build_rules({
        "types": {
            "a": {"can_overlap": ["b"], "color": "#000000"},
            "b": {"can_overlap": [], "color": "#FFFFFF"},
        }
    })
    assert rules.can_overlap("a", "b")
    assert rules.can_overlap("b", "a")


def test_unknown_type_in_table_is_rejected():
    with pytest.raises(ValueError):
        build_rules({"types": {"a": {"can_overlap": ["ghost"]}}})


def test_rules_are_immutable(rules):
    with pytest.raises(TypeError):
        rules.compatible["show"] = frozenset()
    with pytest.raises(AttributeError):
        rules.compatible["show"].add("event")


def test_normalize_type_accepts_accented_regie(rules):
    assert rules.normalize_type("régie") == "regie"
    assert rules.normalize_type("show") == "show"
    with pytest.raises(ValueError):
        rules.normalize_type("concert")


def test_assignment_roles(rules):
    assert rules.eligible_roles("show") == {"artiste", "administrateur"}
    assert rules.eligible_roles("ticketing") == {"billeterie", "administrateur"}
    for disabled in ("event", "calage", "rental"):
        assert not rules.assignment_enabled(disabled)


def test_colors(rules):
    assert rules.color_for("show", "confirmed") == "#16A34A"
    assert rules.color_for("show", None) == "#7C3AED"
    assert rules.color_for("permanence", "confirmed") == "#10B981"
    assert rules.color_for("unknown") == rules.default_color


def test_ordered_follows_table_order(rules):
    assert rules.ordered({"regie", "show", "calage"}) == ["show", "regie", "calage"]


def test_load_rules_from_json(tmp_path):
    data = json.loads(json.dumps(DEFAULT_RULES))
    data["version"] = 2
    data["max_shows_per_room_per_day"] = 3
    path = tmp_path / "rules.json"
    path.write_text(json.dumps(data), encoding="utf-8")

    rules = load_rules(str(path))
    assert rules.version == 2
    assert rules.max_shows_per_room_per_day == 3
    assert rules.can_overlap("show", "regie")


def test_load_rules_without_file_uses_defaults():
    assert load_rules(None).max_shows_per_room_per_day == 5
