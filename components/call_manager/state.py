"""Per-browser-session objects for the call manager pages.

The response store, voice transport and call session are built once per
Streamlit session and kept in st.session_state, so every page works on the
same instances.
"""
import logging

import streamlit as st

from config.settings import settings
from services.call_session import CallSession
from services.response_store import ResponseStore, create_response_store
from services.voice_token_client import VoiceTokenClient
from services.voice_transport import SimulatedVoiceTransport

logger = logging.getLogger(__name__)


def get_response_store() -> ResponseStore:
    """Response store for this session (loaded on first use)."""
    if 'response_store' not in st.session_state:
        st.session_state.response_store = create_response_store(settings)
    return st.session_state.response_store


def get_call_session() -> CallSession:
    """Call session for this browser session."""
    if 'call_session' not in st.session_state:
        transport = SimulatedVoiceTransport(
            greeting=settings.SIMULATED_GREETING,
            connect_delay=settings.SIMULATED_CONNECT_DELAY_SECONDS,
        )
        st.session_state.call_session = CallSession(get_response_store(), transport)
        logger.info("Call session initialized")
    return st.session_state.call_session


@st.cache_data(ttl=600, show_spinner=False)
def fetch_voice_token() -> str:
    """Fetch (and cache for 10 minutes) a voice access token.

    Raises:
        VoiceTokenError: If the token cannot be obtained
    """
    return VoiceTokenClient.from_settings(settings).fetch_access_token_sync()
