"""
Backend Package.

FastAPI REST server over SQLAlchemy, plus the shared core:
configuration, logging and the application exception hierarchy.
"""
