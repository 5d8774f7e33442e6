from functools import reduce
from numbers import Number
from typing import Any, Dict, List, Sequence


# ============ Отчёты по dataLayer ============


def events_by_name(layer: Sequence[dict]) -> Dict[str, int]:
    """Количество payload'ов по имени события"""
    return reduce(
        lambda acc, p: {**acc, p.get("event"): acc.get(p.get("event"), 0) + 1},
        layer,
        {},
    )


def _amount(value: Any) -> float:
    return value if isinstance(value, Number) and not isinstance(value, bool) else 0


def purchase_summary(layer: Sequence[dict]) -> Dict[str, Any]:
    """
    Сводка по покупкам (newOrderPlaced)
    Нечисловые суммы считаются нулём
    """
    purchases = tuple(
        p["ecommerce"]["purchase"]["actionField"]
        for p in layer
        if p.get("event") == "newOrderPlaced"
    )

    def accumulate(acc: dict, action: dict) -> dict:
        return {
            "orders": acc["orders"] + 1,
            "revenue": acc["revenue"] + _amount(action.get("revenue")),
            "shipping": acc["shipping"] + _amount(action.get("shipping")),
            "tax": acc["tax"] + _amount(action.get("tax")),
        }

    return reduce(accumulate, purchases, {"orders": 0, "revenue": 0, "shipping": 0, "tax": 0})


# детальный просмотр, клик и добавление в корзину
_PRODUCT_ACTIONS = {
    "newProductDetail": "detail",
    "newProductClick": "click",
    "newAddToCart": "add",
}


def top_products(layer: Sequence[dict], k: int = 5) -> List[dict]:
    """Топ-K товаров по числу взаимодействий (просмотр, клик, корзина)"""

    def product_ids(payload: dict) -> List[Any]:
        action = _PRODUCT_ACTIONS.get(payload.get("event"))
        if action is None:
            return []
        products = payload.get("ecommerce", {}).get(action, {}).get("products") or []
        return [p.get("id") for p in products if p.get("id") is not None]

    def accumulate(acc: dict, pid: Any) -> dict:
        return {**acc, pid: acc.get(pid, 0) + 1}

    counts = reduce(accumulate, (pid for p in layer for pid in product_ids(p)), {})
    ranked = sorted(counts.items(), key=lambda x: x[1], reverse=True)[:k]
    return [{"product_id": pid, "interactions": n} for pid, n in ranked]


def layer_summary(layer: Sequence[dict], k: int = 5) -> Dict[str, Any]:
    return {
        "total_payloads": len(layer),
        "events": events_by_name(layer),
        "purchases": purchase_summary(layer),
        "top_products": top_products(layer, k),
    }
