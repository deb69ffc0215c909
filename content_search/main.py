"""Entry point for running the FastAPI application."""

import os

import uvicorn
from dotenv import load_dotenv

load_dotenv()

if __name__ == "__main__":
    # Can be overridden: PORT=7860 python -m content_search.main
    port = int(os.getenv("PORT", "8000"))

    uvicorn.run(
        "content_search.src.api.main:app",
        host="0.0.0.0",
        port=port,
        reload=os.getenv("UVICORN_RELOAD", "").lower() in {"1", "true", "yes"},
    )
