"""Sale finalization: totals, stock clamp, ledger, history."""

from datetime import date, datetime, timezone

import pytest
from fastapi import HTTPException

from distroflow.models.sale import CartItem, Customer, Payment, Sale, Seller
from distroflow.schemas.sale import SaleFilters
from distroflow.services.cart_service import CartService
from distroflow.services.sale_service import SYSTEM_OPERATOR, SaleService

cart = CartService()
service = SaleService()


class TestEmptyCart:

    def test_returns_none_and_leaves_state_unchanged(self, state):
        before = state.model_dump()
        assert service.process_sale(state, "Dinheiro") is None
        assert state.model_dump() == before


class TestProcessSale:

    def test_single_line_example(self, state):
        cart.add_to_cart(state, state.find_product("1"), 2)
        sale = service.process_sale(state, "Dinheiro")

        assert sale.total == pytest.approx(17.98)
        assert sale.profit == pytest.approx(6.98)
        assert state.find_product("1").stock == 46
        assert state.cart == []
        assert state.sales == [sale]

    def test_totals_over_several_lines(self, state):
        cart.add_to_cart(state, state.find_product("1"), 2)
        cart.add_to_cart(state, state.find_product("4"), 3)
        cart.add_to_cart(state, state.find_product("8"), 1)
        sale = service.process_sale(state, "Pix")

        expected_total = 8.99 * 2 + 27.90 * 3 + 3.49
        expected_profit = (8.99 - 5.50) * 2 + (27.90 - 18.00) * 3 + (3.49 - 1.50)
        assert sale.total == pytest.approx(expected_total)
        assert sale.profit == pytest.approx(expected_profit)

    def test_oversold_stock_is_clamped_at_zero(self, state):
        cart.add_to_cart(state, state.find_product("9"), 5)  # stock 2
        service.process_sale(state, "Dinheiro")
        assert state.find_product("9").stock == 0

    def test_untouched_products_keep_stock(self, state):
        cart.add_to_cart(state, state.find_product("1"), 1)
        service.process_sale(state, "Dinheiro")
        assert state.find_product("2").stock == 120

    def test_items_are_a_snapshot(self, state):
        cart.add_to_cart(state, state.find_product("1"), 1)
        sale = service.process_sale(state, "Dinheiro")
        state.products[0].sale_price = 50.0
        assert sale.items[0].product.sale_price == 8.99
        assert sale.items[0].product.stock == 48

    def test_records_customer_seller_and_split_payments(self, state):
        cart.add_to_cart(state, state.find_product("4"), 1)
        sale = service.process_sale(
            state,
            "mixed",
            customer=Customer(id="2", name="João Silva", phone="11999990001"),
            seller=Seller(id="1", name="Carlos"),
            payments=[Payment(method="Pix", amount=20.0), Payment(method="Dinheiro", amount=7.9)],
        )
        assert sale.customer.name == "João Silva"
        assert sale.seller.name == "Carlos"
        assert [p.method for p in sale.payments] == ["Pix", "Dinheiro"]

    def test_each_sale_gets_its_own_id(self, state):
        cart.add_to_cart(state, state.find_product("1"), 1)
        first = service.process_sale(state, "Dinheiro")
        cart.add_to_cart(state, state.find_product("1"), 1)
        second = service.process_sale(state, "Dinheiro")
        assert first.id != second.id
        assert state.find_product("1").stock == 46


class TestSaleMovements:

    def test_one_venda_movement_per_line(self, state):
        cart.add_to_cart(state, state.find_product("1"), 2)
        cart.add_to_cart(state, state.find_product("3"), 4)
        sale = service.process_sale(state, "Dinheiro", seller=Seller(id="2", name="Ana"))

        movements = state.stock_movements
        assert len(movements) == 2
        by_product = {m.product_id: m for m in movements}
        assert by_product["1"].type == "venda"
        assert by_product["1"].quantity == -2
        assert by_product["1"].previous_stock == 48
        assert by_product["1"].new_stock == 46
        assert by_product["3"].notes == f"Venda #{sale.id}"
        assert by_product["3"].operator == "Ana"

    def test_operator_defaults_to_system(self, state):
        cart.add_to_cart(state, state.find_product("1"), 1)
        service.process_sale(state, "Dinheiro")
        assert state.stock_movements[0].operator == SYSTEM_OPERATOR

    def test_product_missing_from_catalog_is_skipped(self, state):
        cart.add_to_cart(state, state.find_product("1"), 1)
        state.products = [p for p in state.products if p.id != "1"]
        sale = service.process_sale(state, "Dinheiro")
        assert sale.total == pytest.approx(8.99)
        assert state.stock_movements == []


class TestHistory:

    def test_list_sales_newest_first(self, state):
        ids = []
        for _ in range(3):
            cart.add_to_cart(state, state.find_product("2"), 1)
            ids.append(service.process_sale(state, "Dinheiro").id)
        assert [s.id for s in service.list_sales(state)] == list(reversed(ids))
        assert len(service.list_sales(state, skip=1, limit=1)) == 1

    def test_get_unknown_sale_404(self, state):
        with pytest.raises(HTTPException) as exc:
            service.get_sale(state, "nope")
        assert exc.value.status_code == 404


def _recorded_sale(state, sale_id, when, method="Pix", customer=None, seller=None, total=10.0, profit=4.0):
    sale = Sale(
        id=sale_id,
        items=[CartItem(product=state.find_product("1"), quantity=1)],
        total=total,
        profit=profit,
        payment_method=method,
        customer=customer,
        seller=seller,
        date=when,
    )
    state.sales = [*state.sales, sale]
    return sale


SAO_PAULO = "America/Sao_Paulo"


class TestHistoryFilters:

    @pytest.fixture
    def history(self, state):
        ana = Seller(id="2", name="Ana")
        carlos = Seller(id="1", name="Carlos")
        joao = Customer(id="2", name="João Silva", phone="11999990001")
        _recorded_sale(state, "a1b2c3", datetime(2024, 5, 1, 13, 0, tzinfo=timezone.utc), "Pix", joao, ana, 100.0, 40.0)
        # 22:30 on May 1st in São Paulo
        _recorded_sale(state, "d4e5f6", datetime(2024, 5, 2, 1, 30, tzinfo=timezone.utc), "Dinheiro", None, carlos, 50.0, 10.0)
        _recorded_sale(state, "g7h8i9", datetime(2024, 5, 3, 15, 0, tzinfo=timezone.utc), "Pix", None, None, 30.0, 12.0)
        return state

    def _ids(self, state, **filters):
        return [s.id for s in service.filter_sales(state, SaleFilters(**filters), SAO_PAULO)]

    def test_no_filters_newest_first(self, history):
        assert self._ids(history) == ["g7h8i9", "d4e5f6", "a1b2c3"]

    def test_search_by_id_customer_and_seller(self, history):
        assert self._ids(history, search="d4e5") == ["d4e5f6"]
        assert self._ids(history, search="joão") == ["a1b2c3"]
        assert self._ids(history, search="CARLOS") == ["d4e5f6"]
        assert self._ids(history, search="nobody") == []

    def test_payment_method_and_seller(self, history):
        assert self._ids(history, payment_method="Pix") == ["g7h8i9", "a1b2c3"]
        assert self._ids(history, seller_id="1") == ["d4e5f6"]

    def test_single_day_uses_store_time_zone(self, history):
        assert self._ids(history, date_from=date(2024, 5, 1)) == ["d4e5f6", "a1b2c3"]

    def test_date_range_is_inclusive(self, history):
        ids = self._ids(history, date_from=date(2024, 5, 2), date_to=date(2024, 5, 3))
        assert ids == ["g7h8i9"]

    def test_list_sales_paginates_filtered_history(self, history):
        page = service.list_sales(history, skip=1, limit=5, filters=SaleFilters(payment_method="Pix"), tz_name=SAO_PAULO)
        assert [s.id for s in page] == ["a1b2c3"]


class TestHistorySummary:

    def test_totals_margin_and_breakdown(self, state):
        when = datetime(2024, 5, 1, 13, 0, tzinfo=timezone.utc)
        sales = [
            _recorded_sale(state, "s1", when, "Pix", total=100.0, profit=40.0),
            _recorded_sale(state, "s2", when, "Dinheiro", total=50.0, profit=10.0),
            _recorded_sale(state, "s3", when, "Pix", total=30.0, profit=12.0),
        ]
        summary = service.history_summary(sales)

        assert summary.sale_count == 3
        assert summary.revenue == pytest.approx(180.0)
        assert summary.profit == pytest.approx(62.0)
        assert summary.margin == pytest.approx(62.0 / 180.0 * 100)
        assert summary.by_payment_method == {"Pix": pytest.approx(130.0), "Dinheiro": pytest.approx(50.0)}

    def test_empty_history(self):
        summary = service.history_summary([])
        assert summary.sale_count == 0
        assert summary.margin == 0.0
        assert summary.by_payment_method == {}
