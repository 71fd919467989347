"""Shared plugin infrastructure.

- **config**: Render configuration resolution and process settings
- **constants**: Default header and escape tables
- **exceptions**: Structured exception hierarchy with error codes
- **logging**: Loguru setup with console and JSON formatters
- **types**: Type aliases for configuration tables and hooks
"""
