"""Reusable UI components for imgshelf application."""

import re

import streamlit as st
import structlog

from imgshelf.errors import GalleryError, handle_error
from imgshelf.models.image import ImageRecord
from imgshelf.services.gallery import GallerySession, UploadResult

logger = structlog.get_logger()

GRID_COLUMNS = 4

MARKDOWN_SPECIAL_CHARS = re.compile(r"([\\`*_{}\[\]()#+\-.!|<>~:$])")


def escape_markdown(text: str) -> str:
    """Backslash-escape Markdown syntax so user supplied text renders literally."""
    return MARKDOWN_SPECIAL_CHARS.sub(r"\\\1", text)


def render_empty_state(title: str, description: str, icon: str = "📭") -> None:
    """
    Render an empty state message.

    Args:
        title: Main title for the empty state
        description: Description text
        icon: Emoji icon to display
    """
    col1, col2, col3 = st.columns([1, 2, 1])

    with col2:
        st.markdown(
            f"""
        <div style='text-align: center; padding: 2rem 0;'>
            <div style='font-size: 4rem; margin-bottom: 1rem;'>{icon}</div>
            <h3 style='color: #666; margin-bottom: 1rem;'>{title}</h3>
            <p style='color: #888; margin-bottom: 2rem;'>{description}</p>
        </div>
        """,
            unsafe_allow_html=True,
        )


def render_error(error: Exception) -> None:
    """Show an error using its user-facing message."""
    error_info = handle_error(error)
    st.error(error_info.user_message)


def render_upload_result(result: UploadResult) -> None:
    """Report per-file outcomes of an upload batch."""
    for issue in result.skipped + result.failed:
        st.warning(escape_markdown(issue.message or f"Skipping {issue.filename}."))
    if result.added:
        st.success(f"Uploaded {len(result.added)} image(s).")


def render_image_grid(gallery: GallerySession) -> None:
    """
    Render the collection as a thumbnail grid, most recent first.

    Clicking "View" selects the image and reruns into the viewer.
    """
    images = gallery.images

    for i in range(0, len(images), GRID_COLUMNS):
        cols = st.columns(GRID_COLUMNS)

        for j, col in enumerate(cols):
            index = i + j
            if index >= len(images):
                with col:
                    st.empty()
                continue

            record = images[index]
            with col:
                render_thumbnail(record)
                if st.button("View", key=f"view_{record.id}"):
                    gallery.select(index)
                    st.rerun()


def render_thumbnail(record: ImageRecord) -> None:
    """Render one grid cell: image, name and upload time."""
    st.image(record.decode_payload())
    st.markdown(f"**{escape_markdown(record.name or 'Untitled')}**")
    st.caption(record.uploaded_at.astimezone().strftime("%Y-%m-%d %H:%M:%S"))


def render_viewer(gallery: GallerySession) -> None:
    """Render the selected image with previous/next/close/delete controls."""
    record = gallery.current_image()
    if record is None:
        return

    st.image(record.decode_payload(), caption=record.get_display_name())

    col_prev, col_next, col_close, col_delete = st.columns(4)

    with col_prev:
        if st.button("◀ Previous"):
            gallery.select_previous()
            st.rerun()

    with col_next:
        if st.button("Next ▶"):
            gallery.select_next()
            st.rerun()

    with col_close:
        if st.button("Close"):
            gallery.clear_selection()
            st.rerun()

    with col_delete:
        confirmed = st.checkbox("Confirm delete", key=f"confirm_delete_{record.id}")
        if st.button("🗑️ Delete", disabled=not confirmed):
            try:
                gallery.delete_image(confirm=confirmed)
            except GalleryError as e:
                logger.error("viewer_delete_failed", error=str(e))
                render_error(e)
            else:
                st.rerun()

    st.divider()
