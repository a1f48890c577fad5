"""
Service entrypoint.

Run locally with:
    uvicorn app.main:app --reload

or `python -m app.main`, which binds to the host and port from settings.
"""

import uvicorn

from spendlog.api import create_app
from spendlog.config import get_settings

app = create_app()


if __name__ == "__main__":
    settings = get_settings().app
    uvicorn.run("app.main:app", host=settings.api_host, port=settings.api_port)
