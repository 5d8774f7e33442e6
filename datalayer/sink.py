from dataclasses import dataclass, field
from functools import reduce
from typing import Any, Dict, Iterable, List, Optional, Protocol, Tuple

from .config import DEFAULT_CONFIG, PixelConfig
from .ftypes import Maybe
from .translator import translate


class Sink(Protocol):
    """Приёмник payload'ов (очередь dataLayer). Синхронный, без ошибок"""

    def enqueue(self, payload: dict) -> None:
        ...


@dataclass
class DataLayer:
    """In-memory аналог window.dataLayer"""

    items: List[dict] = field(default_factory=list)

    def enqueue(self, payload: dict) -> None:
        self.items.append(payload)

    def events(self) -> Tuple[str, ...]:
        return tuple(p.get("event") for p in self.items)

    def __len__(self) -> int:
        return len(self.items)


@dataclass(frozen=True)
class EventBus:
    """
    Иммутабельная шина: сообщение пикселя -> трансляция -> все подписанные приёмники.
    subscribe возвращает новую шину, исходная не меняется.
    """

    sinks: Tuple[Sink, ...] = ()
    config: PixelConfig = DEFAULT_CONFIG

    def subscribe(self, sink: Sink) -> "EventBus":
        return EventBus(sinks=self.sinks + (sink,), config=self.config)

    def publish(self, raw_message: Any) -> Maybe[dict]:
        """
        Транслирует сообщение и кладёт payload в каждый приёмник.
        Неизвестные и пустые события ни в один приёмник не попадают.
        """
        payload = translate(raw_message, self.config)
        if payload.is_some():
            for sink in self.sinks:
                sink.enqueue(payload.value)
        return payload


# ============ Конструкторы сообщений ============


def create_event(event_name: str, data: Optional[Dict[str, Any]] = None, origin: str = "") -> dict:
    """Сырое сообщение пикселя в том виде, в каком его присылает витрина"""
    return {"origin": origin, "data": {**(data or {}), "eventName": event_name}}


def create_pixel_bus(
    sink: Optional[Sink] = None, config: PixelConfig = DEFAULT_CONFIG
) -> EventBus:
    """Шина с одним приёмником (по умолчанию - новый DataLayer)"""
    return EventBus(config=config).subscribe(sink if sink is not None else DataLayer())


# ============ Последовательности сообщений ============


def apply_messages(bus: EventBus, messages: Iterable[Any]) -> Tuple[dict, ...]:
    """
    Публикует сообщения по порядку.
    Возвращает кортеж payload'ов, которые ушли в приёмники.
    """

    def publish_one(pushed: Tuple[dict, ...], message: Any) -> Tuple[dict, ...]:
        return bus.publish(message).map(lambda p: pushed + (p,)).get_or_else(pushed)

    return reduce(publish_one, messages, ())
