"""Tests for the Wishlist aggregate."""

from partstore.wishlist.wishlist import ToggleResult, Wishlist


class TestToggle:
    def test_first_toggle_adds(self):
        wishlist = Wishlist.create("cust-001")
        assert wishlist.toggle("prod-001") is ToggleResult.ADDED
        assert wishlist.contains("prod-001")
        assert wishlist.products[0].added_at is not None

    def test_second_toggle_removes(self):
        wishlist = Wishlist.create("cust-001")
        wishlist.toggle("prod-001")
        assert wishlist.toggle("prod-001") is ToggleResult.REMOVED
        assert not wishlist.contains("prod-001")
        assert len(wishlist.products) == 0

    def test_products_are_a_set(self):
        wishlist = Wishlist.create("cust-001")
        wishlist.toggle("prod-001")
        wishlist.toggle("prod-002")
        wishlist.toggle("prod-001")
        wishlist.toggle("prod-001")
        assert sorted(str(p.product_id) for p in wishlist.products) == ["prod-001", "prod-002"]


class TestClear:
    def test_removes_everything(self):
        wishlist = Wishlist.create("cust-001")
        wishlist.toggle("prod-001")
        wishlist.toggle("prod-002")
        wishlist.clear()
        assert len(wishlist.products) == 0

    def test_clear_empty(self):
        wishlist = Wishlist.create("cust-001")
        wishlist.clear()
        assert len(wishlist.products) == 0
