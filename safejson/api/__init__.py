"""HTTP-facing side of the plugin.

- **plugin**: Installation onto an application and request-bound dependency
- **renderer**: Response construction pipeline
- **validators**: Legacy JSON hijacking defence
- **security_headers**: Security header table
- **error_handler**: Translation of plugin errors into 500 responses
"""
