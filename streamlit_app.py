"""
Call Centre Assistant - Main Application
Entry point for the Streamlit app with persistent sidebar
"""
import json
import logging

import streamlit as st

from config.settings import settings
from components.call_manager.state import get_call_session

logging.basicConfig(
    level=settings.LOG_LEVEL,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)

# ====================
# Page Configuration
# ====================
st.set_page_config(
    page_title=settings.APP_NAME,
    page_icon="📞",
    layout="wide",
    initial_sidebar_state="expanded",
    menu_items={
        'About': f"{settings.APP_NAME} - browser call centre assistant"
    }
)

# ====================
# Load Custom CSS
# ====================
try:
    with open("static/custom.css") as f:
        st.markdown(f"<style>{f.read()}</style>", unsafe_allow_html=True)
except FileNotFoundError:
    logging.getLogger(__name__).warning("static/custom.css not found, using default styling")

# ====================
# Define Page Navigation
# ====================
pages = [
    st.Page("pages/1_📞_Call_Manager.py", title="Call Manager", icon="📞", default=True),
    st.Page("pages/2_📊_Dashboard.py", title="Dashboard", icon="📊"),
]

# ====================
# Persistent Sidebar
# ====================
with st.sidebar:
    st.header(f"📞 {settings.APP_NAME}")
    st.caption(f"Environment: {settings.APP_ENV}")
    st.divider()

    st.markdown("### Session")
    try:
        call_session = get_call_session()
    except json.JSONDecodeError:
        st.error("Saved call responses could not be read")
    else:
        st.write("**Call state:**", call_session.state.value)
        st.write("**Numbers loaded:**", len(call_session.targets))
        st.write("**Saved responses:**", len(call_session.store))

    if settings.DEBUG:
        with st.expander("🔧 Configuration"):
            st.write("**Response store:**", settings.RESPONSE_STORE_BACKEND)
            st.write("**Voice credentials:**", "set" if settings.has_voice_credentials else "missing")
            st.write("**EVI config:**", settings.HUME_CONFIG_ID or "default")
            st.write("**Streamlit Version:**", st.__version__)

# ====================
# Run Navigation
# ====================
pg = st.navigation(pages)
pg.run()
