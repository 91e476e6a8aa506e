"""Entry point — run with: python -m baronial.main"""
import uvicorn

from baronial.api.v0.app import app  # noqa: F401
from baronial.core.config import settings

if __name__ == "__main__":
    uvicorn.run("baronial.main:app", host=settings.host, port=settings.port)
