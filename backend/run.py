#!/usr/bin/env python3
# backend/run.py
"""
Development server runner for the availability API.
"""
import os
from pathlib import Path
import sys

backend_dir = Path(__file__).parent
sys.path.insert(0, str(backend_dir))
os.chdir(backend_dir)

import uvicorn  # noqa: E402

from schedule_engine.core.config import settings  # noqa: E402

if __name__ == "__main__":
    print(f"Starting availability API (timezone={settings.timezone})")
    print("Access at: http://localhost:8000")
    print("API Docs: http://localhost:8000/docs")

    uvicorn.run(
        "schedule_engine.main:app",
        host="0.0.0.0",
        port=int(os.getenv("PORT", "8000")),
        reload=not settings.is_production,
        log_level=settings.log_level.lower(),
    )
