import asyncio
import json
from functools import reduce
from typing import Any, Dict, List, Optional, Sequence, Tuple

from .config import DEFAULT_CONFIG, PixelConfig
from .ftypes import Maybe
from .sink import DataLayer, Sink
from .translator import translate


# ============ Загрузка записанных сообщений ============


def load_messages(path: str) -> Tuple[dict, ...]:
    """Читает JSON-массив сырых сообщений пикселя"""
    with open(path, "r", encoding="utf-8") as f:
        data = json.load(f)
    return tuple(m for m in data if isinstance(m, dict))


# ============ Асинхронная трансляция ============


async def translate_batch_async(
    messages: Sequence[Any], config: PixelConfig = DEFAULT_CONFIG
) -> List[Maybe[dict]]:
    """
    Транслирует пачку сообщений параллельно.
    Порядок результатов совпадает с порядком сообщений (gather его сохраняет)
    """

    async def translate_one(message: Any) -> Maybe[dict]:
        await asyncio.sleep(0)
        return translate(message, config)

    return list(await asyncio.gather(*(translate_one(m) for m in messages)))


# ============ Проигрывание записанных сообщений ============


async def replay_messages_async(
    messages: Sequence[Any],
    sink: Sink,
    batch_size: int = 50,
    config: PixelConfig = DEFAULT_CONFIG,
) -> Dict[str, int]:
    """
    Проигрывает записанные сообщения пикселя в приёмник пакетами.
    Пакеты идут строго по очереди, так что порядок payload'ов в приёмнике
    совпадает с порядком сообщений.
    """
    batch_size = max(1, batch_size)
    batches = [messages[i : i + batch_size] for i in range(0, len(messages), batch_size)]

    pushed = 0
    for batch in batches:
        results = await translate_batch_async(batch, config)
        for payload in results:
            if payload.is_some():
                sink.enqueue(payload.value)
        pushed += reduce(lambda acc, p: acc + int(p.is_some()), results, 0)

    return {
        "total_messages": len(messages),
        "pushed": pushed,
        "ignored": len(messages) - pushed,
        "batches_processed": len(batches),
    }


def run_replay(
    messages: Sequence[Any],
    sink: Optional[Sink] = None,
    config: PixelConfig = DEFAULT_CONFIG,
) -> Dict[str, int]:
    """Синхронная обёртка для UI"""
    return asyncio.run(
        replay_messages_async(messages, sink if sink is not None else DataLayer(), config=config)
    )
