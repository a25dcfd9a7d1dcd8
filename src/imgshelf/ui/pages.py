"""Login/registration and gallery pages for imgshelf application."""

from datetime import UTC, datetime

import streamlit as st
import structlog

from imgshelf.errors import GalleryError
from imgshelf.models.blob import FileBlob
from imgshelf.services.gallery import GallerySession
from imgshelf.ui.components import (
    escape_markdown,
    render_empty_state,
    render_error,
    render_image_grid,
    render_upload_result,
    render_viewer,
)

logger = structlog.get_logger(__name__)

UPLOAD_EXTENSIONS = ["jpg", "jpeg", "png", "gif"]


def render_auth_page(gallery: GallerySession) -> None:
    """Render the login form, or the registration form when toggled."""
    st.markdown("## 🖼️ Personal Image Gallery")

    if st.session_state.get("show_register", False):
        render_register_form(gallery)
        if st.button("Back to login"):
            st.session_state.show_register = False
            st.rerun()
    else:
        render_login_form(gallery)
        st.caption("Demo account: demo / demo123")
        if st.button("Create an account"):
            st.session_state.show_register = True
            st.rerun()


def render_login_form(gallery: GallerySession) -> None:
    with st.form("login_form", clear_on_submit=True):
        username = st.text_input("Username")
        password = st.text_input("Password", type="password")
        submitted = st.form_submit_button("Log in", type="primary")

    if submitted:
        try:
            gallery.login(username, password)
        except GalleryError as e:
            render_error(e)
        else:
            st.rerun()


def render_register_form(gallery: GallerySession) -> None:
    with st.form("register_form", clear_on_submit=True):
        username = st.text_input("Username")
        password = st.text_input("Password", type="password")
        confirm = st.text_input("Confirm password", type="password")
        submitted = st.form_submit_button("Create account", type="primary")

    if submitted:
        try:
            gallery.register(username, password, confirm)
        except GalleryError as e:
            render_error(e)
        else:
            st.success("Account created. You can now log in.")
            st.session_state.show_register = False


def render_gallery_page(gallery: GallerySession) -> None:
    """Render greeting, toolbar, uploader, viewer and grid for the logged-in user."""
    col_greeting, col_export, col_logout = st.columns([3, 1, 1])

    with col_greeting:
        st.markdown(f"### Hi, {escape_markdown(gallery.current_user)}")

    with col_logout:
        confirmed = st.checkbox("Confirm log out")
        if st.button("Log out", disabled=not confirmed):
            if gallery.logout(confirm=confirmed):
                st.rerun()
                return

    render_uploader(gallery)

    # Export reflects uploads made in this run.
    with col_export:
        render_export(gallery)

    st.divider()

    if not gallery.images:
        render_empty_state(
            title="No images yet",
            description="Upload JPEG, PNG or GIF files (max 5MB each) to start your gallery.",
            icon="📷",
        )
        return

    render_viewer(gallery)
    render_image_grid(gallery)


def render_export(gallery: GallerySession) -> None:
    """Build an export snapshot on request and offer it as a download."""
    if not st.button("⬇️ Export"):
        return

    exported_at = datetime.now(UTC)
    st.download_button(
        "Download JSON",
        data=gallery.export_json(exported_at),
        file_name=gallery.export_filename(exported_at),
        mime="application/json",
        type="primary",
    )


def render_uploader(gallery: GallerySession) -> None:
    """Multi-file uploader; each batch is uploaded once, then the widget is reset."""
    uploader_key = f"uploader_{st.session_state.get('uploader_generation', 0)}"
    uploaded_files = st.file_uploader(
        "Upload images",
        type=UPLOAD_EXTENSIONS,
        accept_multiple_files=True,
        key=uploader_key,
    )

    if not uploaded_files:
        return

    blobs = [FileBlob.from_uploaded_file(uploaded_file) for uploaded_file in uploaded_files]
    try:
        result = gallery.upload(blobs)
    except GalleryError as e:
        logger.error("upload_failed", error=str(e), file_count=len(blobs))
        render_error(e)
        return
    finally:
        st.session_state.uploader_generation = st.session_state.get("uploader_generation", 0) + 1

    render_upload_result(result)
