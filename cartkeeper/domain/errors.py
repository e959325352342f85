# cartkeeper/domain/errors.py


class CartError(Exception):
    """Base for every failure the cart engine reports to its callers."""

    code = "CartError"

    def to_detail(self) -> dict:
        return {"error": self.code, "message": str(self)}


class InvalidQuantity(CartError, ValueError):
    code = "InvalidQuantity"


class ProductNotFound(CartError, LookupError):
    code = "ProductNotFound"

    def __init__(self, product_id: int):
        super().__init__(f"Product {product_id} not found")
        self.product_id = product_id


class OutOfStock(CartError, ValueError):
    code = "OutOfStock"

    def __init__(self, product_id: int):
        super().__init__(f"Product {product_id} is not available")
        self.product_id = product_id
        self.available = 0


class InsufficientStock(CartError, ValueError):
    code = "InsufficientStock"

    def __init__(self, product_id: int, available: int):
        super().__init__(f"Only {available} items available in stock")
        self.product_id = product_id
        self.available = available

    def to_detail(self) -> dict:
        return {**super().to_detail(), "available": self.available}


class ItemNotFound(CartError, LookupError):
    code = "ItemNotFound"

    def __init__(self, product_id: int):
        super().__init__(f"Item {product_id} not found in cart")
        self.product_id = product_id


class DuplicateOwner(CartError):
    code = "DuplicateOwner"


class InvalidOwner(CartError, ValueError):
    code = "InvalidOwner"


class ConcurrentCartUpdate(CartError, RuntimeError):
    code = "ConcurrentCartUpdate"
