"""
Валидация на границе: сырой dict сообщения пикселя -> типизированное событие.

Каждый парсер возвращает Either: Left({"error": ...}) если из сообщения
нельзя собрать ничего осмысленного, иначе Right(событие).
Необязательные поля не проверяются дальше по коду - здесь они
приводятся к None / "" / пустому кортежу один раз.
"""

from typing import Any, Callable, Dict, Optional, Tuple

from .domain import (
    CartChangeEvent,
    CartItem,
    CartLoadedEvent,
    CommercialOffer,
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
    Seller,
    Sku,
    TransactionProduct,
    UserDataEvent,
)
from .ftypes import Either


def _as_dict(value: Any) -> dict:
    return value if isinstance(value, dict) else {}


def _as_list(value: Any) -> list:
    return list(value) if isinstance(value, (list, tuple)) else []


def _error(message: str) -> Either:
    return Either.left({"error": message})


# ============ Сообщение ============


def parse_message(raw: Any) -> Either[dict, PixelMessage]:
    """{"origin": ..., "data": {"eventName": ...}} -> PixelMessage"""
    if not isinstance(raw, dict):
        return _error("message is not an object")

    data = raw.get("data")
    if not isinstance(data, dict):
        return _error("message has no data")

    event_name = data.get("eventName")
    if not isinstance(event_name, str):
        return _error("message has no eventName")

    origin = raw.get("origin")
    return Either.right(
        PixelMessage(
            origin=origin if isinstance(origin, str) else "",
            event_name=event_name,
            data=data,
        )
    )


# ============ Reference id SKU ============
# vtex.store не нормализует referenceId: в productView это список
# [{"Key": ..., "Value": ...}], в остальных событиях - объект {"Value": ...}


def reference_from_list(raw: Any) -> str:
    """Value первого элемента списка, иначе пустая строка"""
    if not isinstance(raw, list) or not raw or not isinstance(raw[0], dict):
        return ""
    value = raw[0].get("Value")
    return value if value is not None else ""


def reference_from_object(raw: Any) -> str:
    """Value объекта, иначе пустая строка"""
    value = _as_dict(raw).get("Value")
    return value if value is not None else ""


# ============ Каталог ============


def parse_offer(raw: Any) -> Optional[CommercialOffer]:
    if not isinstance(raw, dict):
        return None
    return CommercialOffer(price=raw.get("Price"))


def parse_seller(raw: Any) -> Optional[Seller]:
    if not isinstance(raw, dict):
        return None
    return Seller(
        is_default=bool(raw.get("sellerDefault")),
        offer=parse_offer(raw.get("commertialOffer")),
    )


def parse_sellers(raw: Any) -> Optional[Tuple[Seller, ...]]:
    if raw is None:
        return None
    parsed = map(parse_seller, _as_list(raw))
    return tuple(s for s in parsed if s is not None)


def parse_sku(raw: Any, reference: Callable[[Any], str]) -> Optional[Sku]:
    if not isinstance(raw, dict):
        return None
    return Sku(
        item_id=raw.get("itemId"),
        name=raw.get("name"),
        reference_id=reference(raw.get("referenceId")),
        sellers=parse_sellers(raw.get("sellers")),
        seller=parse_seller(raw.get("seller")),
    )


def parse_product(
    raw: Dict[str, Any], reference: Callable[[Any], str] = reference_from_object
) -> Product:
    items = (parse_sku(i, reference_from_object) for i in _as_list(raw.get("items")))
    return Product(
        product_id=raw.get("productId"),
        product_name=raw.get("productName"),
        brand=raw.get("brand"),
        product_reference=raw.get("productReference"),
        categories=tuple(c for c in _as_list(raw.get("categories")) if isinstance(c, str)),
        selected_sku=parse_sku(raw.get("selectedSku"), reference),
        sku=parse_sku(raw.get("sku"), reference),
        items=tuple(i for i in items if i is not None),
    )


# ============ Парсеры событий ============


def parse_product_view(message: PixelMessage) -> Either[dict, ProductViewEvent]:
    product = message.data.get("product")
    if not isinstance(product, dict):
        return _error("productView without product")
    return Either.right(
        ProductViewEvent(
            product=parse_product(product, reference_from_list),
            list=message.data.get("list"),
        )
    )


def parse_product_click(message: PixelMessage) -> Either[dict, ProductClickEvent]:
    product = message.data.get("product")
    if not isinstance(product, dict):
        return _error("productClick without product")
    return Either.right(
        ProductClickEvent(
            product=parse_product(product, reference_from_object),
            position=message.data.get("position"),
            list=message.data.get("list"),
        )
    )


def parse_cart_item(raw: Dict[str, Any]) -> CartItem:
    return CartItem(
        product_id=raw.get("productId"),
        sku_id=raw.get("skuId"),
        name=raw.get("name"),
        brand=raw.get("brand"),
        category=raw.get("category"),
        price=raw.get("price"),
        price_is_int=raw.get("priceIsInt") is True,
        quantity=raw.get("quantity"),
        product_ref_id=raw.get("productRefId"),
        reference_id=raw.get("referenceId"),
        variant=raw.get("variant"),
    )


def parse_cart_change(message: PixelMessage) -> Either[dict, CartChangeEvent]:
    items = tuple(
        parse_cart_item(i) for i in _as_list(message.data.get("items")) if isinstance(i, dict)
    )
    return Either.right(CartChangeEvent(items=items, currency=message.data.get("currency")))


def parse_transaction_product(raw: Dict[str, Any]) -> TransactionProduct:
    tree = raw.get("categoryTree")
    return TransactionProduct(
        id=raw.get("id"),
        sku=raw.get("sku"),
        name=raw.get("name"),
        brand=raw.get("brand"),
        category_tree=tuple(str(c) for c in tree) if isinstance(tree, (list, tuple)) else None,
        price=raw.get("price"),
        quantity=raw.get("quantity"),
        product_ref_id=raw.get("productRefId"),
        sku_ref_id=raw.get("skuRefId"),
        sku_name=raw.get("skuName"),
    )


def parse_order_placed(message: PixelMessage) -> Either[dict, OrderPlacedEvent]:
    data = message.data
    # витрина кладёт товары заказа во вложенный data; верхний уровень - запасной вариант
    products = _as_dict(data.get("data")).get("transactionProducts")
    if products is None:
        products = data.get("transactionProducts")
    order = Order(
        affiliation=data.get("transactionAffiliation"),
        coupon=data.get("coupon"),
        order_group=data.get("orderGroup"),
        revenue=data.get("transactionTotal"),
        shipping=data.get("transactionShipping"),
        tax=data.get("transactionTax"),
        products=(
            tuple(parse_transaction_product(p) for p in products if isinstance(p, dict))
            if isinstance(products, (list, tuple))
            else None
        ),
    )
    return Either.right(OrderPlacedEvent(order=order, raw=dict(data)))


def parse_impression(raw: Any) -> Optional[Impression]:
    if not isinstance(raw, dict) or not isinstance(raw.get("product"), dict):
        return None
    return Impression(
        product=parse_product(raw["product"], reference_from_object),
        position=raw.get("position"),
    )


def parse_product_impression(message: PixelMessage) -> Either[dict, ImpressionEvent]:
    parsed = map(parse_impression, _as_list(message.data.get("impressions")))
    return Either.right(
        ImpressionEvent(
            impressions=tuple(i for i in parsed if i is not None),
            list=message.data.get("list"),
            currency=message.data.get("currency"),
        )
    )


def parse_order_form_item(raw: Dict[str, Any]) -> OrderFormItem:
    name = raw.get("name")
    return OrderFormItem(
        id=raw.get("id"),
        product_id=raw.get("productId"),
        name=name if isinstance(name, str) else "",
        sku_name=raw.get("skuName"),
        product_categories=tuple(_as_dict(raw.get("productCategories")).items()),
        brand_name=_as_dict(raw.get("additionalInfo")).get("brandName"),
        selling_price=raw.get("sellingPrice"),
        quantity=raw.get("quantity"),
        product_ref_id=raw.get("productRefId"),
        reference_id=raw.get("referenceId"),
    )


def parse_cart_loaded(message: PixelMessage) -> Either[dict, CartLoadedEvent]:
    order_form = message.data.get("orderForm")
    if not isinstance(order_form, dict):
        return _error("cartLoaded without orderForm")
    items = tuple(
        parse_order_form_item(i) for i in _as_list(order_form.get("items")) if isinstance(i, dict)
    )
    return Either.right(CartLoadedEvent(items=items))


def parse_promotion(message: PixelMessage) -> Either[dict, PromotionEvent]:
    return Either.right(PromotionEvent(promotions=message.data.get("promotions")))


def parse_page_view(message: PixelMessage) -> Either[dict, PageViewEvent]:
    page_url = message.data.get("pageUrl")
    if not isinstance(page_url, str):
        return _error("pageView without pageUrl")
    return Either.right(
        PageViewEvent(
            page_url=page_url,
            origin=message.origin,
            referrer=message.data.get("referrer"),
            page_title=message.data.get("pageTitle"),
        )
    )


def parse_user_data(message: PixelMessage) -> Either[dict, UserDataEvent]:
    return Either.right(
        UserDataEvent(
            is_authenticated=bool(message.data.get("isAuthenticated")),
            user_id=message.data.get("id"),
        )
    )
