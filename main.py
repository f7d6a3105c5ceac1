"""
Root entrypoint — run with:
    uvicorn main:app --reload
    or:  python main.py
"""

from typerone.core.config import settings
from typerone.main import app  # noqa: F401

if __name__ == "__main__":
    import uvicorn

    uvicorn.run("main:app", host="0.0.0.0", port=settings.PORT, reload=settings.MODE == "development")
