"""
Main Streamlit application for imgshelf.

This is the entry point for the image gallery web application:

    streamlit run src/imgshelf/main.py
"""

import streamlit as st

from imgshelf.config import get_database_path
from imgshelf.logging_config import configure_structured_logging, get_logger
from imgshelf.models.database import KeyValueStore, create_database
from imgshelf.services.gallery import GallerySession
from imgshelf.ui.pages import render_auth_page, render_gallery_page

configure_structured_logging()
logger = get_logger(__name__)


@st.cache_resource
def get_kv_store() -> KeyValueStore:
    """Open the local database once per server process."""
    db_path = get_database_path()
    logger.info("opening_database", db_path=db_path)
    return create_database(db_path)


def get_gallery() -> GallerySession:
    """
    Get this browser session's gallery controller.

    The controller and its session pointer both live in st.session_state,
    so they end together with the browser session.
    """
    if "gallery" not in st.session_state:
        gallery = GallerySession(get_kv_store(), session_storage=st.session_state)
        gallery.restore_session()
        st.session_state.gallery = gallery
    return st.session_state.gallery


def main() -> None:
    """Main application entry point."""
    st.set_page_config(page_title="imgshelf", page_icon="🖼️", layout="wide")

    gallery = get_gallery()
    if gallery.is_authenticated:
        render_gallery_page(gallery)
    else:
        render_auth_page(gallery)


if __name__ == "__main__":
    main()
