import streamlit as st
from functools import partial

# --- Import your modularized functions ---
from agent_logic import GeminiChatBackend
from chart_builder import ChartView, ErrorView, build_view, create_pie_chart
from chart_models import PieChartReply
from src.config import (
    DEFAULT_COUNTRY,
    GOOGLE_API_KEY,
    INDICATORS,
    LLM_BACKEND_URL,
    configure_logging,
)
from src.core.chat import HttpChatBackend, ask_backend
from src.core.classifier import PredictionClient, classify_upload, format_confidence
from src.core.controller import ScreenController
from src.core.countries import country_label, resolve_country_code
from src.core.state import Error, Success
from src.core.world_bank import WorldBankClient

configure_logging()

st.set_page_config(
    page_title="World Indicators Dashboard",
    page_icon="📈",
    layout="wide",
)

st.title("📈 World Indicators Dashboard")

st.markdown("""
Use the tabs below:
- **📊 Indicators:** GDP growth, CO2 emissions and agricultural land from the World Bank.
- **💬 Chat:** Ask a question in plain English. Answers come back as text or as a pie chart.
- **🎧 Audio Classifier:** Upload an audio file and get a predicted label with its confidence.
""")
st.divider()


# --- Clients (cached for the lifetime of the server) ---

@st.cache_resource
def get_world_bank_client():
    return WorldBankClient()


@st.cache_resource
def get_prediction_client():
    return PredictionClient()


@st.cache_resource
def get_chat_backend():
    """Prefers a configured backend URL, then Gemini when an API key is set."""
    if LLM_BACKEND_URL:
        return HttpChatBackend(LLM_BACKEND_URL)
    if GOOGLE_API_KEY:
        return GeminiChatBackend()
    return None


def get_controller(key: str, load_fn=None) -> ScreenController:
    """One controller per screen, kept across reruns in the session."""
    if key not in st.session_state:
        st.session_state[key] = ScreenController(load_fn, name=key)
    return st.session_state[key]


def render_error(message: str, retry_key: str = None, on_retry=None):
    st.error(message)
    if retry_key and st.button("Retry", key=retry_key):
        on_retry()
        st.rerun()


# --- Create Tabs for Different App Sections ---
tab1, tab2, tab3 = st.tabs(["📊 Indicators", "💬 Chat", "🎧 Audio Classifier"])

# --- Tab 1: Indicators ---
with tab1:
    col1, col2 = st.columns([3, 1])
    with col1:
        selected_key = st.radio(
            "Indicator",
            options=list(INDICATORS),
            format_func=lambda key: INDICATORS[key].title,
            horizontal=True,
        )
    with col2:
        country_text = st.text_input("Country or region", value=DEFAULT_COUNTRY)

    spec = INDICATORS[selected_key]
    try:
        country = resolve_country_code(country_text)
    except ValueError as e:
        st.warning(str(e))
        country = None

    if country:
        st.header(f"{spec.title}: {country_label(country)}")
        controller = get_controller(
            f"indicator:{spec.key}:{country}",
            partial(get_world_bank_client().load_indicator, spec, country),
        )
        # Auto-load the first time this screen is shown
        if controller.state.generation == 0:
            controller.reload()
        if controller.state.is_loading:
            with st.spinner("Loading..."):
                controller.wait()

        view = build_view(controller.state.fetch, spec)
        if isinstance(view, ErrorView):
            render_error(view.message, retry_key=f"retry:{spec.key}:{country}", on_retry=controller.reload)
        elif isinstance(view, ChartView):
            st.plotly_chart(view.figure, use_container_width=True)
            st.subheader("Detailed Data")
            st.dataframe(view.table, use_container_width=True, hide_index=True)

# --- Tab 2: Chat ---
with tab2:
    st.header("Ask a Question")

    backend = get_chat_backend()
    if backend is None:
        st.warning("Set LLM_BACKEND_URL or GOOGLE_API_KEY in your .env file to enable the chat.")

    if "chat_messages" not in st.session_state:
        st.session_state.chat_messages = []

    for message in st.session_state.chat_messages:
        with st.chat_message(message["role"]):
            content = message["content"]
            if isinstance(content, PieChartReply):
                st.plotly_chart(create_pie_chart(content), use_container_width=True)
            else:
                st.markdown(content)

    prompt = st.chat_input("e.g., What is the world's energy mix by source?", disabled=backend is None)
    if prompt:
        st.chat_message("user").markdown(prompt)
        st.session_state.chat_messages.append({"role": "user", "content": prompt})

        controller = get_controller("chat")
        controller.reload(partial(ask_backend, backend, prompt))
        with st.spinner("Thinking..."):
            state = controller.wait()

        if isinstance(state.fetch, Success):
            reply = state.fetch.data
            content = reply if isinstance(reply, PieChartReply) else reply.text
        else:
            message = state.fetch.message if isinstance(state.fetch, Error) else "No reply"
            content = f"Sorry, I encountered an error: {message}"

        with st.chat_message("assistant"):
            if isinstance(content, PieChartReply):
                st.plotly_chart(create_pie_chart(content), use_container_width=True)
            else:
                st.markdown(content)
        st.session_state.chat_messages.append({"role": "assistant", "content": content})

# --- Tab 3: Audio Classifier ---
with tab3:
    st.header("Classify an Audio File")

    controller = get_controller("classifier")
    uploaded = st.file_uploader("Select Audio File", type=["wav", "mp3", "ogg", "flac", "m4a"])

    # A new selection discards the previous result
    selection = (uploaded.name, uploaded.size) if uploaded else None
    if st.session_state.get("classifier_selection") != selection:
        st.session_state.classifier_selection = selection
        controller.reset()

    if uploaded:
        st.caption(f"Selected: {uploaded.name}")

    if st.button("Predict ML", disabled=controller.state.is_loading):
        data = uploaded.getvalue() if uploaded else None
        name = uploaded.name if uploaded else "audio.wav"
        controller.reload(partial(classify_upload, get_prediction_client(), data, name))
        with st.spinner("Uploading and classifying..."):
            controller.wait()

    state = controller.state.fetch
    if isinstance(state, Error):
        st.error(state.message)
    elif isinstance(state, Success):
        result = state.data
        st.markdown(f"**Prediction:** {result.label}")
        st.markdown(f"Confidence: {format_confidence(result)}")
