"""Streamlit presentation layer for imgshelf application."""
