from dataclasses import dataclass, field
from typing import Any, Dict, Optional, Tuple


# ============ Входящее сообщение ============


@dataclass(frozen=True)
class PixelMessage:
    origin: str
    event_name: str
    data: Dict[str, Any]


# ============ Каталог ============


@dataclass(frozen=True)
class CommercialOffer:
    price: Any = None


@dataclass(frozen=True)
class Seller:
    is_default: bool
    offer: Optional[CommercialOffer] = None


@dataclass(frozen=True)
class Sku:
    item_id: Optional[str]
    name: Optional[str]
    reference_id: str = ""
    sellers: Optional[Tuple[Seller, ...]] = None  # None - поля не было вовсе
    seller: Optional[Seller] = None  # в показах (impressions) продавец один


@dataclass(frozen=True)
class Product:
    product_id: Optional[str]
    product_name: Optional[str]
    brand: Optional[str]
    product_reference: Optional[str]
    categories: Tuple[str, ...] = ()
    selected_sku: Optional[Sku] = None
    sku: Optional[Sku] = None
    items: Tuple[Sku, ...] = ()


@dataclass(frozen=True)
class Impression:
    product: Product
    position: Any = None


# ============ Корзина и заказ ============


@dataclass(frozen=True)
class CartItem:
    product_id: Optional[str]
    sku_id: Optional[str]
    name: Optional[str]
    brand: Optional[str]
    category: Optional[str]
    price: Any
    price_is_int: bool
    quantity: Any
    product_ref_id: Optional[str] = None
    reference_id: Optional[str] = None
    variant: Optional[str] = None


@dataclass(frozen=True)
class OrderFormItem:
    id: Optional[str]
    product_id: Optional[str]
    name: str
    sku_name: Optional[str]
    product_categories: Tuple[Tuple[str, Any], ...]  # порядок ключей сохраняется
    brand_name: Optional[str]
    selling_price: Any
    quantity: Any
    product_ref_id: Optional[str] = None
    reference_id: Optional[str] = None


@dataclass(frozen=True)
class TransactionProduct:
    id: Optional[str]
    sku: Optional[str]
    name: Optional[str]
    brand: Optional[str]
    category_tree: Optional[Tuple[str, ...]]
    price: Any
    quantity: Any
    product_ref_id: Optional[str] = None
    sku_ref_id: Optional[str] = None
    sku_name: Optional[str] = None


@dataclass(frozen=True)
class Order:
    affiliation: Any
    coupon: Any
    order_group: Any
    revenue: Any
    shipping: Any
    tax: Any
    products: Optional[Tuple[TransactionProduct, ...]]


# ============ Типизированные события ============


@dataclass(frozen=True)
class ProductViewEvent:
    product: Product
    list: Optional[str] = None


@dataclass(frozen=True)
class ProductClickEvent:
    product: Product
    position: Any = None
    list: Optional[str] = None


@dataclass(frozen=True)
class CartChangeEvent:
    items: Tuple[CartItem, ...]
    currency: Optional[str] = None


@dataclass(frozen=True)
class OrderPlacedEvent:
    order: Order
    raw: Dict[str, Any] = field(default_factory=dict)  # поля заказа как пришли


@dataclass(frozen=True)
class ImpressionEvent:
    impressions: Tuple[Impression, ...]
    list: Optional[str] = None
    currency: Optional[str] = None


@dataclass(frozen=True)
class CartLoadedEvent:
    items: Tuple[OrderFormItem, ...]


@dataclass(frozen=True)
class PromotionEvent:
    promotions: Any


@dataclass(frozen=True)
class PageViewEvent:
    page_url: str
    origin: str
    referrer: Optional[str] = None
    page_title: Optional[str] = None


@dataclass(frozen=True)
class UserDataEvent:
    is_authenticated: bool
    user_id: Optional[str] = None
