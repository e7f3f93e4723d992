"""
test_filters.py — Tests for the board's item filter predicate

Covers each filter dimension, AND composition, the "unassigned" sentinel,
id comparison across int/str, and partial filter updates.

Called by: pytest
Depends on: app/assignments/filters.py, conftest.py (make_item)
"""

import pytest

from app.assignments.filters import AssignmentFilters, filter_items, matches
from app.schemas.items import ItemOut


@pytest.fixture()
def bracket(make_item):
    return make_item(
        "i1",
        inquiry_id="q1",
        name="Steel Bracket",
        title="Q3 Order",
        customer_id="c1",
        customer_name="Acme",
        priority="HIGH",
    )


# ── search ──────────────────────────────────────────────────────────


class TestSearch:
    def test_customer_name_matches_case_insensitive(self, bracket):
        assert matches(bracket, AssignmentFilters(search="acme")) is True

    def test_unrelated_term_excludes(self, bracket):
        assert matches(bracket, AssignmentFilters(search="bolt")) is False

    def test_item_name_matches(self, bracket):
        assert matches(bracket, AssignmentFilters(search="BRACKET")) is True

    def test_inquiry_title_matches(self, bracket):
        assert matches(bracket, AssignmentFilters(search="q3 ord")) is True

    def test_description_matches(self, make_item):
        item = make_item("i2", name="Plate", description="Zinc plated finish")
        assert matches(item, AssignmentFilters(search="zinc")) is True

    def test_search_is_trimmed(self, bracket):
        assert matches(bracket, AssignmentFilters(search="  acme  ")) is True

    def test_whitespace_only_search_is_no_constraint(self, bracket):
        assert matches(bracket, AssignmentFilters(search="   ")) is True

    def test_missing_inquiry_does_not_raise(self):
        item = ItemOut(id="i9", inquiry_id="q9", name=None)
        assert matches(item, AssignmentFilters(search="acme")) is False


# ── Exact-match dimensions ──────────────────────────────────────────


class TestExactDimensions:
    def test_customer_id(self, bracket):
        assert matches(bracket, AssignmentFilters(customer_id="c1")) is True
        assert matches(bracket, AssignmentFilters(customer_id="c2")) is False

    def test_inquiry_id(self, bracket):
        assert matches(bracket, AssignmentFilters(inquiry_id="q1")) is True
        assert matches(bracket, AssignmentFilters(inquiry_id="q2")) is False

    def test_priority_comes_from_inquiry(self, bracket):
        assert matches(bracket, AssignmentFilters(priority="HIGH")) is True
        assert matches(bracket, AssignmentFilters(priority="LOW")) is False

    def test_status(self, make_item):
        item = make_item("i1", status="IN_PROGRESS")
        assert matches(item, AssignmentFilters(status="IN_PROGRESS")) is True
        assert matches(item, AssignmentFilters(status="PENDING")) is False

    def test_assignee(self, make_item):
        item = make_item("i1", assigned_to_id="u1")
        assert matches(item, AssignmentFilters(assigned_to_id="u1")) is True
        assert matches(item, AssignmentFilters(assigned_to_id="u2")) is False

    def test_integer_ids_match_their_string_form(self, make_item):
        item = make_item(7, inquiry_id=3, customer_id=5, assigned_to_id=11)
        f = AssignmentFilters(customer_id="5", inquiry_id="3", assigned_to_id="11")
        assert matches(item, f) is True

    def test_none_means_no_constraint(self, bracket):
        f = AssignmentFilters(search=None, customer_id=None, priority=None, status=None)
        assert matches(bracket, f) is True


# ── Unassigned sentinel ─────────────────────────────────────────────


class TestUnassignedSentinel:
    def test_matches_null_assignee(self, make_item):
        assert matches(make_item("i1"), AssignmentFilters(assigned_to_id="unassigned")) is True

    def test_rejects_any_assignee(self, make_item):
        item = make_item("i1", assigned_to_id="u1")
        assert matches(item, AssignmentFilters(assigned_to_id="unassigned")) is False


# ── Composition ─────────────────────────────────────────────────────


class TestComposition:
    def test_default_filters_match_everything(self, make_item):
        items = [make_item("i1"), make_item("i2", assigned_to_id="u1", status="COSTED")]
        assert filter_items(items, AssignmentFilters()) == items

    def test_dimensions_combine_with_and(self, bracket):
        assert matches(bracket, AssignmentFilters(search="acme", priority="HIGH")) is True
        assert matches(bracket, AssignmentFilters(search="acme", priority="LOW")) is False

    def test_adding_satisfied_constraint_never_removes(self, bracket):
        base = AssignmentFilters(search="acme")
        narrowed = base.merged(customer_id="c1", status="PENDING", assigned_to_id="unassigned")
        assert matches(bracket, base) is True
        assert matches(bracket, narrowed) is True

    def test_filter_items_keeps_input_order(self, make_item):
        items = [make_item(f"i{n}", priority="HIGH" if n % 2 else "LOW") for n in range(6)]
        result = filter_items(items, AssignmentFilters(priority="HIGH"))
        assert [i.id for i in result] == ["i1", "i3", "i5"]


# ── Partial updates ─────────────────────────────────────────────────


class TestMerged:
    def test_merge_replaces_only_given_fields(self):
        f = AssignmentFilters(search="acme", priority="HIGH").merged(priority="")
        assert f.search == "acme"
        assert f.priority == ""

    def test_merge_returns_copy(self):
        original = AssignmentFilters(search="acme")
        original.merged(search="bolt")
        assert original.search == "acme"

    def test_unknown_field_rejected(self):
        with pytest.raises(ValueError, match="colour"):
            AssignmentFilters().merged(colour="red")
