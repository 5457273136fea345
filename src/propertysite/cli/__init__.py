"""
Command-line interface modules.

Provides CLI entry points for:
- api_server: Start the form server
"""
