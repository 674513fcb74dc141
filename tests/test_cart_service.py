"""Cart transitions over an in-memory StoreState."""

from distroflow.services.cart_service import CartService

service = CartService()


class TestAddToCart:

    def test_appends_new_line(self, state):
        service.add_to_cart(state, state.find_product("1"), 2)
        assert len(state.cart) == 1
        assert state.cart[0].product.id == "1"
        assert state.cart[0].quantity == 2

    def test_same_product_sums_quantities(self, state):
        product = state.find_product("1")
        for qty in (1, 3, 5):
            service.add_to_cart(state, product, qty)
        assert len(state.cart) == 1
        assert state.cart[0].quantity == 9

    def test_does_not_check_stock(self, state):
        product = state.find_product("9")  # stock 2
        service.add_to_cart(state, product, 10)
        assert state.cart[0].quantity == 10

    def test_line_is_a_snapshot_of_the_product(self, state):
        product = state.find_product("1")
        service.add_to_cart(state, product, 1)
        product.sale_price = 99.0
        assert state.cart[0].product.sale_price == 8.99


class TestChangeCart:

    def test_remove_existing_line(self, state):
        service.add_to_cart(state, state.find_product("1"), 1)
        service.add_to_cart(state, state.find_product("2"), 1)
        service.remove_from_cart(state, "1")
        assert [it.product.id for it in state.cart] == ["2"]

    def test_remove_unknown_is_noop(self, state):
        service.add_to_cart(state, state.find_product("1"), 1)
        service.remove_from_cart(state, "does-not-exist")
        assert len(state.cart) == 1

    def test_update_quantity_replaces_value(self, state):
        service.add_to_cart(state, state.find_product("1"), 4)
        service.update_cart_quantity(state, "1", 7)
        assert state.cart[0].quantity == 7

    def test_update_quantity_is_not_validated(self, state):
        service.add_to_cart(state, state.find_product("1"), 4)
        service.update_cart_quantity(state, "1", 0)
        assert state.cart[0].quantity == 0

    def test_update_unknown_is_noop(self, state):
        service.update_cart_quantity(state, "1", 3)
        assert state.cart == []

    def test_clear_cart(self, state):
        service.add_to_cart(state, state.find_product("1"), 1)
        service.add_to_cart(state, state.find_product("4"), 2)
        service.clear_cart(state)
        assert state.cart == []


class TestCartSummary:

    def test_totals(self, state):
        service.add_to_cart(state, state.find_product("1"), 2)  # 8.99
        service.add_to_cart(state, state.find_product("4"), 1)  # 27.90
        summary = service.get_cart_summary(state)

        assert summary.total_quantity == 3
        assert abs(summary.total_price - 45.88) < 1e-9
        assert summary.items[0].line_total == 8.99 * 2

    def test_empty_cart(self, state):
        summary = service.get_cart_summary(state)
        assert summary.items == []
        assert summary.total_quantity == 0
        assert summary.total_price == 0.0
