"""
HTTP API.

Build the application with `inkwell.api.app.create_app(settings)`.
"""
