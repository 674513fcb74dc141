# distroflow/services/cart_service.py
from distroflow.models.catalog import Product
from distroflow.models.sale import CartItem
from distroflow.models.store import StoreState
from distroflow.schemas.cart import CartLineRead, CartSummary


class CartService:
    """
    Cart transitions over an explicit StoreState.

    Rules:
      - at most one line per product; adding an existing product sums
        the quantities
      - the product is snapshotted by value when first added
      - stock is NOT checked here; sale finalization clamps at zero
    """

    def get_cart_summary(self, state: StoreState) -> CartSummary:
        """
        Return full cart summary:
          - list of CartLineRead (with line_total)
          - total_quantity
          - total_price
        """
        lines: list[CartLineRead] = []
        total_qty = 0
        total_price = 0.0

        for it in state.cart:
            line_total = it.product.sale_price * it.quantity
            total_qty += it.quantity
            total_price += line_total

            lines.append(
                CartLineRead(
                    product_id=it.product.id,
                    name=it.product.name,
                    sku=it.product.sku,
                    quantity=it.quantity,
                    unit_price=it.product.sale_price,
                    line_total=line_total,
                )
            )

        return CartSummary(
            items=lines,
            total_quantity=total_qty,
            total_price=total_price,
        )

    def add_to_cart(self, state: StoreState, product: Product, quantity: int) -> None:
        existing = next((it for it in state.cart if it.product.id == product.id), None)

        if existing:
            state.cart = [
                it.model_copy(update={"quantity": it.quantity + quantity})
                if it.product.id == product.id
                else it
                for it in state.cart
            ]
        else:
            item = CartItem(product=product.model_copy(), quantity=quantity)
            state.cart = [*state.cart, item]

    def remove_from_cart(self, state: StoreState, product_id: str) -> None:
        """
        Remove the line for product_id; no-op if it is not in the cart.
        """
        state.cart = [it for it in state.cart if it.product.id != product_id]

    def update_cart_quantity(
        self,
        state: StoreState,
        product_id: str,
        quantity: int,
    ) -> None:
        """
        Replace the quantity of the matching line as given.
        No-op if the product is not in the cart.
        """
        state.cart = [
            it.model_copy(update={"quantity": quantity}) if it.product.id == product_id else it
            for it in state.cart
        ]

    def clear_cart(self, state: StoreState) -> None:
        state.cart = []
