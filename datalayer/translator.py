"""
Трансляция событий пикселя витрины в payload'ы Enhanced Ecommerce
для dataLayer Google Tag Manager.

Имена полей и вложенность (ecommerce.detail.products, ecommerce.add.products,
ecommerce.purchase, ...) - внешний контракт GTM, их нельзя менять.
"""

import logging
from typing import Any, Callable, Dict, Optional, Tuple

from .config import DEFAULT_CONFIG, PixelConfig
from .domain import (
    CartChangeEvent,
    CartItem,
    CartLoadedEvent,
    Impression,
    ImpressionEvent,
    Order,
    OrderFormItem,
    OrderPlacedEvent,
    PageViewEvent,
    PixelMessage,
    Product,
    ProductClickEvent,
    ProductViewEvent,
    PromotionEvent,
    Sku,
    TransactionProduct,
    UserDataEvent,
)
from .ftypes import Either, Maybe
from .normalize import (
    cents_to_units,
    fold_category_keys,
    format_cart_price,
    get_category,
    join_category_tree,
    js_number,
    offer_price,
    product_name_without_variant,
    resolve_price,
)
from .parsing import (
    parse_cart_change,
    parse_cart_loaded,
    parse_message,
    parse_order_placed,
    parse_page_view,
    parse_product_click,
    parse_product_impression,
    parse_product_view,
    parse_promotion,
    parse_user_data,
)

logger = logging.getLogger(__name__)


def _or_empty(value: Any) -> Any:
    return value if value is not None else ""


def _list_field(list_name: Optional[str]) -> Dict[str, Any]:
    """actionField.list только если список передан, иначе поля нет вовсе"""
    return {"actionField": {"list": list_name}} if list_name else {}


# ============ Товар: просмотр и клик ============


def _catalog_product(product: Product, sku: Optional[Sku], price: Any) -> dict:
    return {
        "brand": product.brand,
        "category": get_category(product.categories),
        "id": product.product_id,
        "variant": sku.item_id if sku else None,
        "name": product.product_name,
        "dimension1": _or_empty(product.product_reference),
        "dimension2": _or_empty(sku.reference_id if sku else None),
        "dimension3": sku.name if sku else None,
        "price": price,
    }


def product_view(event: ProductViewEvent) -> Maybe[dict]:
    sku = event.product.selected_sku
    price = resolve_price(sku.sellers if sku else None)
    return Maybe.some(
        {
            "ecommerce": {
                "detail": {
                    **_list_field(event.list),
                    "products": [_catalog_product(event.product, sku, price)],
                },
            },
            "event": "newProductDetail",
        }
    )


def _click_sku(product: Product) -> Optional[Sku]:
    if product.sku is not None:
        return product.sku
    return product.items[0] if product.items else None


def _click_sellers(product: Product):
    if product.sku is not None and product.sku.sellers is not None:
        return product.sku.sellers
    return product.items[0].sellers if product.items else None


def product_click(event: ProductClickEvent) -> Maybe[dict]:
    product = event.product
    price = resolve_price(_click_sellers(product))
    entry = {
        **_catalog_product(product, _click_sku(product), price),
        "position": event.position,
    }
    return Maybe.some(
        {
            "event": "newProductClick",
            "ecommerce": {
                "click": {**_list_field(event.list), "products": [entry]},
            },
        }
    )


# ============ Корзина ============


def cart_item_product(item: CartItem) -> dict:
    return {
        "brand": item.brand,
        "category": item.category,
        "id": item.product_id,
        "variant": item.sku_id,
        "name": item.name,
        "price": format_cart_price(item.price, item.price_is_int),
        "quantity": item.quantity,
        "dimension1": _or_empty(item.product_ref_id),
        "dimension2": _or_empty(item.reference_id),  # reference id SKU
        "dimension3": item.variant,  # название SKU
    }


def _cart_change(action: str, event_name: str) -> Callable[[CartChangeEvent], Maybe[dict]]:
    def build(event: CartChangeEvent) -> Maybe[dict]:
        return Maybe.some(
            {
                "ecommerce": {
                    action: {"products": [cart_item_product(i) for i in event.items]},
                    "currencyCode": event.currency,
                },
                "event": event_name,
            }
        )

    return build


add_to_cart = _cart_change("add", "newAddToCart")
remove_from_cart = _cart_change("remove", "newRemoveFromCart")


# ============ Заказ ============


def purchase_action_field(order: Order) -> dict:
    return {
        "affiliation": order.affiliation,
        "coupon": order.coupon if order.coupon else None,
        "id": order.order_group,
        "revenue": order.revenue,
        "shipping": order.shipping,
        "tax": order.tax,
    }


def transaction_product(product: TransactionProduct) -> dict:
    # здесь полный путь категорий, а не первый сегмент как в просмотре/клике
    return {
        "brand": product.brand,
        "category": join_category_tree(product.category_tree),
        "id": product.id,
        "variant": product.sku,
        "name": product.name,
        "price": product.price,
        "quantity": product.quantity,
        "dimension1": _or_empty(product.product_ref_id),
        "dimension2": _or_empty(product.sku_ref_id),
        "dimension3": product.sku_name,
    }


def order_placed(event: OrderPlacedEvent) -> Maybe[dict]:
    order = event.order
    products = (
        [transaction_product(p) for p in order.products]
        if order.products is not None
        else None
    )
    return Maybe.some(
        {
            "event": "newOrderPlaced",
            **event.raw,
            "ecommerce": {
                "purchase": {
                    "actionField": purchase_action_field(order),
                    "products": products,
                },
            },
        }
    )


# ============ Показы ============


def impression_product(list_name: Optional[str]) -> Callable[[Impression], dict]:
    """Цена берётся прямо из предложения продавца SKU, без выбора продавца"""

    def build(impression: Impression) -> dict:
        product, sku = impression.product, impression.product.sku
        price = (
            Maybe(sku.seller if sku else None)
            .bind(offer_price)
            .map(js_number)
            .get_or_else(None)
        )
        return {
            "brand": product.brand,
            "category": get_category(product.categories),
            "id": product.product_id,
            "variant": sku.item_id if sku else None,
            "list": list_name,
            "name": product.product_name,
            "position": impression.position,
            "price": price,
            "dimension1": _or_empty(product.product_reference),
            "dimension2": _or_empty(sku.reference_id if sku else None),
            "dimension3": sku.name if sku else None,
        }

    return build


def product_impression(event: ImpressionEvent) -> Maybe[dict]:
    return Maybe.some(
        {
            "event": "newProductImpression",
            "ecommerce": {
                "currencyCode": event.currency,
                "impressions": list(map(impression_product(event.list), event.impressions)),
            },
        }
    )


# ============ Checkout ============


def checkout_product(item: OrderFormItem) -> dict:
    return {
        "id": item.product_id,
        "variant": item.id,  # id SKU
        "name": product_name_without_variant(item.name, item.sku_name),
        "category": fold_category_keys(item.product_categories),
        "brand": _or_empty(item.brand_name),
        "price": cents_to_units(item.selling_price),
        "quantity": item.quantity,
        "dimension1": _or_empty(item.product_ref_id),
        "dimension2": _or_empty(item.reference_id),
        "dimension3": item.sku_name,
    }


def cart_loaded(event: CartLoadedEvent) -> Maybe[dict]:
    return Maybe.some(
        {
            "event": "checkout",
            "ecommerce": {
                "checkout": {
                    "actionField": {"step": 1},
                    "products": [checkout_product(i) for i in event.items],
                },
            },
        }
    )


# ============ Промо ============


def promo_view(event: PromotionEvent) -> Maybe[dict]:
    return Maybe.some(
        {"event": "promoView", "ecommerce": {"promoView": {"promotions": event.promotions}}}
    )


def promotion_click(event: PromotionEvent) -> Maybe[dict]:
    return Maybe.some(
        {
            "event": "promotionClick",
            "ecommerce": {"promoClick": {"promotions": event.promotions}},
        }
    )


# ============ Страница и пользователь ============


def page_view(event: PageViewEvent) -> Maybe[dict]:
    payload = {
        "event": "pageViewVirtual",
        "location": event.page_url,
        "page": event.page_url.removeprefix(event.origin),
        "referrer": event.referrer,
    }
    if event.page_title:
        payload["title"] = event.page_title
    return Maybe.some(payload)


def user_data(event: UserDataEvent) -> Maybe[dict]:
    if not event.is_authenticated:
        return Maybe.nothing()
    return Maybe.some({"event": "userData", "userId": event.user_id})


# ============ Диспетчер ============

Parser = Callable[[PixelMessage], Either]
Builder = Callable[[Any], Maybe[dict]]

HANDLERS: Dict[str, Tuple[Parser, Builder]] = {
    "productView": (parse_product_view, product_view),
    "productClick": (parse_product_click, product_click),
    "addToCart": (parse_cart_change, add_to_cart),
    "removeFromCart": (parse_cart_change, remove_from_cart),
    "orderPlaced": (parse_order_placed, order_placed),
    "newOrderPlaced": (parse_order_placed, order_placed),
    "productImpression": (parse_product_impression, product_impression),
    "cartLoaded": (parse_cart_loaded, cart_loaded),
    "promoView": (parse_promotion, promo_view),
    "promotionClick": (parse_promotion, promotion_click),
    "pageView": (parse_page_view, page_view),
    "userData": (parse_user_data, user_data),
}


def event_kind(event_name: str, config: PixelConfig = DEFAULT_CONFIG) -> str:
    """ "vtex:productView" -> "productView"; имя без префикса не меняется"""
    prefix = config.event_prefix
    return event_name[len(prefix):] if prefix and event_name.startswith(prefix) else event_name


def translate_message(message: PixelMessage, config: PixelConfig = DEFAULT_CONFIG) -> Maybe[dict]:
    kind = event_kind(message.event_name, config)
    handler = HANDLERS.get(kind)
    if handler is None:
        logger.debug("ignoring unknown event %r", message.event_name)
        return Maybe.nothing()

    parser, builder = handler
    parsed = parser(message)
    if parsed.is_left:
        logger.warning("skipping malformed %s event: %s", kind, parsed.value["error"])
        return Maybe.nothing()
    return builder(parsed.value)


def translate(raw_message: Any, config: PixelConfig = DEFAULT_CONFIG) -> Maybe[dict]:
    """
    Сырое сообщение пикселя -> Some(payload для dataLayer) или Nothing.
    Nothing для неизвестных событий, неавторизованного userData
    и сообщений, из которых нечего собрать. Исключения наружу не выходят.
    """
    message = parse_message(raw_message)
    if message.is_left:
        logger.debug("ignoring message: %s", message.value["error"])
        return Maybe.nothing()
    return translate_message(message.value, config)
