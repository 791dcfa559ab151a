"""
Vercel entry point — exposes the Org Chart API app.

    uvicorn main_vercel:app
"""

import os
import sys

# Ensure repo root is on sys.path
_ROOT = os.path.dirname(os.path.abspath(__file__))
sys.path.insert(0, _ROOT)

from backend.main import app  # noqa: E402,F401
