# streamlit_app.py

import re
import base64
from typing import Optional

import streamlit as st
import streamlit.components.v1 as components

from src.agents.tutor_agent.agent import TutorSession
from src.tools.chat_controller import TutorChatController
from src.tools.image_input import IMAGE_EXTENSIONS, split_data_uri
from src.tools.logging_helper import get_file_logger
from src.tools.transcript import build_transcript_markdown, make_pdf_bytes, markdown_to_html

# Page config and titles
st.set_page_config(
    page_title="Socratic Math Tutor",
    layout="centered",
)
st.title("Socratic Math Tutor")

# Dedicated logger for the Streamlit UI so logs are easy to separate from session logs.
logger = get_file_logger("streamlit_app", "streamlit_app.log")

SCROLL_TO_BOTTOM = "<script>window.scrollTo(0, document.body.scrollHeight);</script>"


# -------------------------
# Initialize session state
# -------------------------
# One tutoring session per browser session; nothing is shared across tabs.
if "controller" not in st.session_state:
    try:
        st.session_state.controller = TutorChatController(TutorSession())
        logger.info("new browser session; tutor session created")
    except Exception as e:
        logger.exception("Failed to create the Gemini client")
        st.error(f"Could not connect to the AI tutor: {e}. Set GOOGLE_API_KEY in your .env file.")
        st.stop()
if "uploader_key" not in st.session_state:
    st.session_state.uploader_key = 0
if "last_upload_key" not in st.session_state:
    st.session_state.last_upload_key = None

controller: TutorChatController = st.session_state.controller


def _image_bytes(data_uri: str) -> Optional[bytes]:
    try:
        _, payload = split_data_uri(data_uri)
        return base64.b64decode(payload)
    except Exception:
        logger.warning("could not decode message image")
        return None


def render_chat():
    """Render controller.messages as chat bubbles (LaTeX $$...$$ blocks rendered separately)."""
    for msg in controller.messages:
        display_role = "assistant" if msg.get("sender") == "ai" else "user"
        text = msg.get("text", "")
        with st.chat_message(display_role):
            latex_blocks = re.findall(r"\$\$(.*?)\$\$", text, flags=re.DOTALL)
            text_without_latex = re.sub(r"\$\$(.*?)\$\$", " ", text, flags=re.DOTALL).strip()
            if text_without_latex:
                st.write(text_without_latex)
            for expr in latex_blocks:
                try:
                    st.latex(expr.strip())
                except Exception:
                    st.write("$$" + expr.strip() + "$$")
            if msg.get("image"):
                img = _image_bytes(msg["image"])
                if img:
                    st.image(img)
                else:
                    st.write("[image could not be displayed]")


def start_over():
    controller.reset_session()
    # a new widget key clears the file picker
    st.session_state.uploader_key += 1
    st.session_state.last_upload_key = None
    logger.info("session reset by user")


# -------------------------
# Upload
# -------------------------
if not controller.session_started:
    st.write("Upload a photo or screenshot of a math problem and I'll guide you through it one step at a time.")

uploaded = st.file_uploader(
    "Upload an image of your math problem",
    accept_multiple_files=False,
    type=IMAGE_EXTENSIONS,
    key=f"problem_uploader_{st.session_state.uploader_key}",
    disabled=controller.is_loading,
)

if uploaded is not None:
    # reruns hand back the same file; only a newly picked file starts a session
    upload_key = getattr(uploaded, "file_id", None) or f"{uploaded.name}:{uploaded.size}"
    if upload_key != st.session_state.last_upload_key:
        st.session_state.last_upload_key = upload_key
        logger.info("file selected: name=%s type=%s size=%s", uploaded.name, uploaded.type, uploaded.size)
        with st.spinner("Reading your problem..."):
            controller.on_file_selected(uploaded.getvalue(), uploaded.type)

# -------------------------
# Conversation
# -------------------------
if controller.messages:
    st.subheader("Conversation")
    render_chat()
    components.html(SCROLL_TO_BOTTOM, height=0)

if controller.error:
    st.error(controller.error)

if controller.session_started:
    why_col, next_col, reset_col = st.columns(3)
    buttons_disabled = controller.is_loading
    with why_col:
        why_pressed = st.button("Why did we do that?", key="why_button", disabled=buttons_disabled)
    with next_col:
        next_pressed = st.button("What's the next step?", key="next_button", disabled=buttons_disabled)
    with reset_col:
        st.button("Start over", key="reset_button", on_click=start_over)

    if why_pressed:
        with st.spinner("Tutor thinking..."):
            controller.handle_why()
        st.rerun()
    if next_pressed:
        with st.spinner("Tutor thinking..."):
            controller.handle_next_step()
        st.rerun()

# -------------------------
# Transcript (PDF with WeasyPrint)
# -------------------------
if controller.messages:
    st.markdown("---")
    st.subheader("Transcript")
    st.write("Download the conversation transcript (PDF).")

    html_body, css_text = markdown_to_html(build_transcript_markdown(controller.messages))
    try:
        pdf_bytes = make_pdf_bytes(html_body, css_text)
    except Exception:
        logger.exception("Transcript PDF rendering failed")
        pdf_bytes = None

    if pdf_bytes:
        st.download_button(
            label="Download Transcript (PDF)",
            data=pdf_bytes,
            file_name="tutor_transcript.pdf",
            mime="application/pdf",
        )
    else:
        st.warning("PDF export is unavailable; showing the transcript as HTML instead.")
        st.download_button(
            label="Download Transcript (HTML)",
            data=html_body,
            file_name="tutor_transcript.html",
            mime="text/html",
        )

# end file
