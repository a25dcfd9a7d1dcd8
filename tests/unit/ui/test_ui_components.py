"""Tests for gallery UI components."""

from unittest.mock import MagicMock, patch

import pytest

from imgshelf.errors import ConflictError
from imgshelf.services.gallery import FileIssue, UploadResult
from imgshelf.ui.components import (
    GRID_COLUMNS,
    escape_markdown,
    render_empty_state,
    render_error,
    render_image_grid,
    render_thumbnail,
    render_upload_result,
    render_viewer,
)


def fake_columns(spec):
    count = spec if isinstance(spec, int) else len(spec)
    return [MagicMock() for _ in range(count)]


@pytest.fixture
def mock_st():
    """Streamlit as seen by the components module."""
    with patch("imgshelf.ui.components.st") as st_mock:
        st_mock.columns.side_effect = fake_columns
        st_mock.button.return_value = False
        st_mock.checkbox.return_value = False
        yield st_mock


@pytest.fixture
def gallery_with_images(logged_in_gallery, blob_factory):
    """Alice with five images: e, d, c, b, a."""
    for name in ["a.png", "b.png", "c.png", "d.png", "e.png"]:
        logged_in_gallery.upload([blob_factory(name)])
    return logged_in_gallery


class TestSimpleComponents:
    """Test cases for message components."""

    def test_render_empty_state(self, mock_st):
        """Test the empty state renders its title and description."""
        render_empty_state("No images yet", "Upload something", "📷")

        html = mock_st.markdown.call_args.args[0]
        assert "No images yet" in html
        assert "Upload something" in html

    def test_render_error_uses_user_message(self, mock_st):
        """Test errors are shown with their user-facing message."""
        render_error(ConflictError("dup", user_message="Username already exists."))

        mock_st.error.assert_called_once_with("Username already exists.")

    def test_render_upload_result(self, mock_st):
        """Test skipped files are warned about and additions confirmed."""
        result = UploadResult(
            added=[MagicMock()],
            skipped=[FileIssue("doc.txt", "unsupported_file_type", "Skipping doc.txt: unsupported file type.")],
        )

        render_upload_result(result)

        mock_st.warning.assert_called_once_with(r"Skipping doc\.txt\: unsupported file type\.")
        mock_st.success.assert_called_once_with("Uploaded 1 image(s).")

    def test_render_upload_result_nothing_added(self, mock_st):
        """Test no success message is shown when nothing was added."""
        render_upload_result(UploadResult())

        mock_st.success.assert_not_called()


class TestEscapeMarkdown:
    """Test cases for escape_markdown()."""

    @pytest.mark.parametrize(
        "text,expected",
        [
            ("plain", "plain"),
            ("a_b*", r"a\_b\*"),
            ("[click](http://x)", r"\[click\]\(http\://x\)"),
            ("# title", r"\# title"),
            ("<b>`x`</b>", r"\<b\>\`x\`\</b\>"),
            (r"back\slash", r"back\\slash"),
        ],
    )
    def test_escapes_syntax(self, text, expected):
        """Test Markdown and HTML syntax characters are backslash-escaped."""
        assert escape_markdown(text) == expected

    def test_thumbnail_name_is_escaped(self, mock_st):
        """Test a file name with Markdown syntax is shown literally."""
        record = MagicMock()
        record.name = "**bold**_[link](x).png"

        render_thumbnail(record)

        mock_st.markdown.assert_called_once_with(r"**\*\*bold\*\*\_\[link\]\(x\)\.png**")

    def test_thumbnail_untitled(self, mock_st):
        """Test an empty name falls back to Untitled."""
        record = MagicMock()
        record.name = ""

        render_thumbnail(record)

        mock_st.markdown.assert_called_once_with("**Untitled**")


class TestImageGrid:
    """Test cases for render_image_grid()."""

    def test_renders_every_image(self, mock_st, gallery_with_images):
        """Test one thumbnail per image across grid rows."""
        render_image_grid(gallery_with_images)

        assert mock_st.image.call_count == 5
        assert mock_st.columns.call_count == 2
        mock_st.columns.assert_called_with(GRID_COLUMNS)

    def test_view_selects_image(self, mock_st, gallery_with_images):
        """Test clicking View selects that image and reruns."""
        target = gallery_with_images.images[2]
        mock_st.button.side_effect = lambda label, key=None, **kwargs: key == f"view_{target.id}"

        render_image_grid(gallery_with_images)

        assert gallery_with_images.current_image() == target
        mock_st.rerun.assert_called_once()


class TestViewer:
    """Test cases for render_viewer()."""

    def test_nothing_selected(self, mock_st, gallery_with_images):
        """Test the viewer is hidden without a selection."""
        render_viewer(gallery_with_images)

        mock_st.image.assert_not_called()

    def test_shows_selected_image(self, mock_st, gallery_with_images):
        """Test the selected image is displayed with its caption."""
        record = gallery_with_images.select(1)

        render_viewer(gallery_with_images)

        assert mock_st.image.call_args.kwargs["caption"] == record.get_display_name()

    def test_next_button(self, mock_st, gallery_with_images):
        """Test Next advances the selection."""
        gallery_with_images.select(4)
        mock_st.button.side_effect = lambda label, **kwargs: label.startswith("Next")

        render_viewer(gallery_with_images)

        assert gallery_with_images.selection == 0

    def test_close_button(self, mock_st, gallery_with_images):
        """Test Close clears the selection."""
        gallery_with_images.select(2)
        mock_st.button.side_effect = lambda label, **kwargs: label == "Close"

        render_viewer(gallery_with_images)

        assert gallery_with_images.selection is None

    def test_delete_requires_checkbox(self, mock_st, gallery_with_images):
        """Test the delete button is disabled until confirmed."""
        gallery_with_images.select(0)

        render_viewer(gallery_with_images)

        delete_call = [call for call in mock_st.button.call_args_list if "Delete" in call.args[0]][0]
        assert delete_call.kwargs["disabled"] is True
        assert len(gallery_with_images.images) == 5

    def test_confirmed_delete(self, mock_st, gallery_with_images):
        """Test a confirmed delete removes the selected image."""
        record = gallery_with_images.select(0)
        mock_st.checkbox.return_value = True
        mock_st.button.side_effect = lambda label, **kwargs: "Delete" in label

        render_viewer(gallery_with_images)

        assert record not in gallery_with_images.images
        assert len(gallery_with_images.images) == 4
        mock_st.rerun.assert_called_once()
