"""Run FastAPI backend server."""

import os

import uvicorn

from shipwright.config import get_settings

if __name__ == "__main__":
    uvicorn.run(
        "backend.main:app",
        host="0.0.0.0",
        port=get_settings().port,
        reload=os.environ.get("SHIPWRIGHT_ENV", "development") == "development",
    )
