import sys
import os
import json
import streamlit as st

sys.path.append(os.path.abspath(os.path.join(os.path.dirname(__file__), "..")))

from datalayer.config import PixelConfig, load_config, configure_logging
from datalayer.replay import load_messages, run_replay
from datalayer.report import layer_summary
from datalayer.sink import DataLayer, create_event
from datalayer.translator import HANDLERS, translate


# ============ Кэширование данных ============
@st.cache_data
def get_messages(path: str):
    return load_messages(path)


def replay(messages, config: PixelConfig):
    """Проигрывает сообщения в новый dataLayer, возвращает (layer, статистика)"""
    layer = DataLayer()
    stats = run_replay(list(messages), layer, config)
    return layer, stats


# ============ Инициализация ============
st.set_page_config(
    page_title="DataLayer Preview",
    page_icon="🏷️",
    layout="wide",
    initial_sidebar_state="expanded",
)

base_config = load_config()
configure_logging(base_config)

# ============ SIDEBAR ============
with st.sidebar:
    st.header("⚙️ Настройки")
    prefix = st.text_input("Префикс событий", value=base_config.event_prefix)
    path = st.text_input("Файл с сообщениями", value=base_config.sample_events_path)
    page = st.radio(
        "Раздел:",
        ["📊 Сводка", "🔀 Поток событий", "🧪 Ручное событие"],
        label_visibility="collapsed",
    )

config = PixelConfig(
    event_prefix=prefix,
    log_level=base_config.log_level,
    sample_events_path=path,
)

st.title("🏷️ Предпросмотр dataLayer")
st.caption("События пикселя витрины → Enhanced Ecommerce payload'ы для GTM")

try:
    messages = get_messages(config.sample_events_path)
except (OSError, ValueError) as e:
    st.error(f"Не удалось прочитать {config.sample_events_path}: {e}")
    st.stop()

layer, stats = replay(messages, config)


# ============ PAGE: СВОДКА ============
if page == "📊 Сводка":
    summary = layer_summary(layer.items)

    col1, col2, col3 = st.columns(3)
    with col1:
        st.metric("📨 Сообщений", stats["total_messages"])
    with col2:
        st.metric("✅ В dataLayer", stats["pushed"])
    with col3:
        st.metric("🚫 Пропущено", stats["ignored"])

    st.divider()
    st.subheader("📈 События")
    if summary["events"]:
        st.bar_chart(summary["events"])

    st.subheader("💰 Покупки")
    st.json(summary["purchases"])

    st.subheader("🔥 Топ товаров")
    st.table(summary["top_products"])


# ============ PAGE: ПОТОК СОБЫТИЙ ============
elif page == "🔀 Поток событий":
    for i, message in enumerate(messages):
        name = message.get("data", {}).get("eventName", "?")
        payload = translate(message, config)
        with st.expander(f"{i + 1}. {name}", expanded=False):
            cols = st.columns(2)
            with cols[0]:
                st.caption("Сообщение")
                st.json(message)
            with cols[1]:
                st.caption("Payload")
                if payload.is_some():
                    st.json(payload.value)
                else:
                    st.info("Событие проигнорировано")


# ============ PAGE: РУЧНОЕ СОБЫТИЕ ============
elif page == "🧪 Ручное событие":
    kind = st.selectbox("Тип события", sorted(HANDLERS))
    origin = st.text_input("Origin", value="https://shop.example.com")
    raw = st.text_area("data (JSON)", value="{}", height=240)

    if st.button("▶️ Транслировать"):
        try:
            data = json.loads(raw)
        except ValueError as e:
            st.error(f"Некорректный JSON: {e}")
        else:
            if not isinstance(data, dict):
                st.error("data должен быть JSON-объектом")
                st.stop()
            message = create_event(f"{config.event_prefix}{kind}", data, origin)
            result = translate(message, config)
            if result.is_some():
                st.json(result.value)
            else:
                st.warning("Payload не сформирован (событие пропущено)")
