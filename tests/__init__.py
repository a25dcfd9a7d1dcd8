"""
Test suite for imgshelf application.

This module contains all test cases for the application:
- Unit tests for models, services, UI components and the CLI
- Integration tests for complete gallery sessions
"""
