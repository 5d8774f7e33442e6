import logging
import math
import re
from decimal import Decimal
from functools import reduce
from numbers import Number
from typing import Any, Optional, Sequence, Tuple

from .domain import Seller
from .ftypes import Maybe, pipe

logger = logging.getLogger(__name__)

_EDGE_SLASH = re.compile(r"^/|/$")


# ============ Продавец и цена ============


def get_seller(sellers: Sequence[Seller]) -> Maybe[Seller]:
    """
    Продавец по умолчанию (sellerDefault), иначе первый в списке.
    Пустой список -> Nothing, вызывающий код оставляет цену пустой.
    """
    default = next((s for s in sellers if s.is_default), None)
    if default is not None:
        return Maybe.some(default)
    return Maybe.some(sellers[0]) if sellers else Maybe.nothing()


def offer_price(seller: Seller) -> Maybe[Any]:
    return Maybe(seller.offer).map(lambda offer: offer.price)


def resolve_price(sellers: Optional[Sequence[Seller]]) -> Optional[Any]:
    """Цена из коммерческого предложения выбранного продавца или None"""
    price = get_seller(sellers or ()).bind(offer_price)
    if price.is_none():
        logger.debug("no seller offer to take price from, price left unset")
    return price.get_or_else(None)


def js_number(value: Any) -> str:
    """
    Строка числа так, как её даёт шаблонная строка JS: 10.0 -> "10",
    1e16 -> "10000000000000000", 1e-05 -> "0.00001".
    Экспонента остаётся только там, где её пишет и JS (>= 1e21, < 1e-6),
    но в питоновском виде ("1e+21", "1e-07").
    """
    if isinstance(value, bool):
        return "true" if value else "false"
    if not isinstance(value, float):
        return str(value)
    if math.isnan(value):
        return "NaN"
    if math.isinf(value):
        return "Infinity" if value > 0 else "-Infinity"
    if value == 0:
        return "0"
    text = repr(value)
    if 1e-6 <= abs(value) < 1e21 and "e" in text:
        text = format(Decimal(text), "f")
    return text[:-2] if text.endswith(".0") else text


def cents_to_units(value: Any) -> Optional[float]:
    """12345 -> 123.45; нечисловое значение -> None"""
    if isinstance(value, bool) or not isinstance(value, Number):
        return None
    return value / 100


def format_cart_price(price: Any, price_is_int: bool) -> Optional[str]:
    """
    Цена позиции корзины строкой.
    price_is_int=True: цена хранится в копейках/центах, делим на 100.
    Иначе цена уже в денежных единицах и просто приводится к строке.
    """
    if price is None:
        return None
    if price_is_int:
        return Maybe(cents_to_units(price)).map(js_number).get_or_else(None)
    return js_number(price)


# ============ Категории ============


def remove_start_and_end_slash(category: Optional[str]) -> Optional[str]:
    """
    "/Apparel & Accessories/Clothing/Tops/" -> "Apparel & Accessories/Clothing/Tops"
    Снимается ровно один слэш с каждого края.
    """
    return _EDGE_SLASH.sub("", category) if category is not None else None


def _first(values: Sequence[str]) -> Optional[str]:
    return values[0] if values else None


def get_category(categories: Sequence[str]) -> Optional[str]:
    """Первый сегмент пути категорий без крайних слэшей, None для пустого пути"""
    return pipe(_first, remove_start_and_end_slash)(categories)


def join_category_tree(tree: Optional[Sequence[str]]) -> Optional[str]:
    """Полный путь категорий для покупки: ["A", "B", "C"] -> "A/B/C" """
    return "/".join(tree) if tree is not None else None


def fold_category_keys(categories: Tuple[Tuple[str, Any], ...]) -> str:
    """Ключи productCategories через "/" в порядке вставки"""
    return reduce(
        lambda acc, key: f"{acc}/{key}" if acc else key,
        (str(key) for key, _ in categories),
        "",
    )


# ============ Название товара ============


def product_name_without_variant(name: str, variant: Optional[str]) -> str:
    """
    "Blue Shirt XL", "XL" -> "Blue Shirt"
    Вариант ищется с конца. Не найден или стоит в начале - имя не меняется.
    Иначе отрезается вариант вместе с пробелом перед ним.
    """
    # пустой вариант не ищем: rfind("") дал бы len(name) и срезал последний символ
    if not isinstance(variant, str) or not variant:
        return name
    index = name.rfind(variant)
    if index in (-1, 0):
        return name
    return name[: index - 1]
