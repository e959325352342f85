#import wszystkich modeli zeby SQLAlchemy je zarejestrowal w base metadata

from cartkeeper.data.models.cart_item import CartItemModel
from cartkeeper.data.models.cart import CartModel

__all__ = ["CartModel", "CartItemModel"]
