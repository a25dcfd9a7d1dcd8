"""Command line tools for imgshelf application."""
