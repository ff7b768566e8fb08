from storefront.models.theme import Theme, UserTheme
from storefront.models.setting import Setting
from storefront.models.product import Product
from storefront.models.order import Order
from storefront.models.order_item import OrderItem
from storefront.models.contact import Contact
