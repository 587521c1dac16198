"""
Unit tests for category list editing.
"""

import pytest

from true_budget.core.categories import add_category, move_category, remove_category

CATEGORIES = ["Food", "Transportation", "Other"]


class TestAddCategory:
    """Test appending categories."""

    def test_appends_trimmed_name(self):
        assert add_category(CATEGORIES, "  Pets ") == ["Food", "Transportation", "Other", "Pets"]
        assert CATEGORIES == ["Food", "Transportation", "Other"]

    def test_rejects_duplicate(self):
        with pytest.raises(ValueError, match="Category already exists"):
            add_category(CATEGORIES, "Food ")

    def test_rejects_blank(self):
        with pytest.raises(ValueError, match="category name"):
            add_category(CATEGORIES, "   ")


class TestRemoveCategory:
    """Test removing categories."""

    def test_removes_name(self):
        assert remove_category(CATEGORIES, "Transportation") == ["Food", "Other"]

    def test_unknown_name(self):
        with pytest.raises(ValueError, match="not found"):
            remove_category(CATEGORIES, "Pets")


class TestMoveCategory:
    """Test reordering categories."""

    def test_move_up(self):
        assert move_category(CATEGORIES, "Other") == ["Food", "Other", "Transportation"]

    def test_move_down(self):
        assert move_category(CATEGORIES, "Food", up=False) == ["Transportation", "Food", "Other"]

    def test_edges_keep_order(self):
        assert move_category(CATEGORIES, "Food") == CATEGORIES
        assert move_category(CATEGORIES, "Other", up=False) == CATEGORIES

    def test_unknown_name(self):
        with pytest.raises(ValueError, match="not found"):
            move_category(CATEGORIES, "Pets", up=False)
