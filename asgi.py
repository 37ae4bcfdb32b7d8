"""
ASGI entry point.

Run with:
    uvicorn asgi:app --reload

Settings come from RECAPTCHA_* environment variables (or .env).
"""

from app import create_app

app = create_app()
