"""
imgshelf - Personal image gallery backed by local storage

A single-tenant gallery for keeping personal images on the local machine:
- Username/password accounts held in a local credential store
- Per-user image collections persisted in DuckDB
- Session continuity for the lifetime of a browser session
- Streamlit front end and a batch command line tool
"""

__version__ = "0.1.0"
__author__ = "imgshelf"
__description__ = "Personal image gallery backed by local storage"
