"""
ASGI entry point.

Used by uvicorn: `uvicorn server.asgi:app` (with backend/ on the path).
Variables from a local .env are loaded before configuration is read.
"""

from dotenv import load_dotenv

load_dotenv()

from server.app import create_app  # pylint: disable=wrong-import-position

app = create_app()
