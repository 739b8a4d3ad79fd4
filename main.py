"""
Palimpsest Server Entry Point

Run with: python main.py
Or with uvicorn: uvicorn app:app --reload

The reconciler starts with the app: run one server process per document store.
"""

import os

import uvicorn

if __name__ == "__main__":
    is_dev = os.getenv("ENVIRONMENT", "development") == "development"

    uvicorn.run(
        "app:app",
        host=os.getenv("PALIMPSEST_HOST", "0.0.0.0"),
        port=int(os.getenv("PALIMPSEST_PORT", "8000")),
        reload=is_dev,
        workers=1,
        log_level=os.getenv("PALIMPSEST_LOG_LEVEL", "info").lower(),
    )
