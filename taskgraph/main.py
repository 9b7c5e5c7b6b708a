from __future__ import annotations

import uvicorn

from .api import app
from .settings import get_settings


def run() -> None:
    settings = get_settings()
    uvicorn.run(app, host=settings.host, port=settings.port, log_level=settings.log_level.lower())


if __name__ == "__main__":
    run()
