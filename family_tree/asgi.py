"""ASGI entry-point, run with ``uvicorn family_tree.asgi:app``."""

from family_tree.main import create_app

app = create_app()
