"""Configuration constants, staging layout, and .env loading.

WHY: The staging layout, entrypoint name and timeouts are a contract with
the conversion engine. Keeping them in one module as plain data makes them
easy to find and impossible to drift apart between the lifecycle, the
orchestrator and the parameter builder.

HOW: python-dotenv loads the .env file on import. Fixed paths are module
constants; tunables read an environment variable with a default. The
load_engine_module_name() function gives a clear error when the engine
binding is not configured.

RULES:
- Staging paths are fixed; the engine's parameter documents reference them
- WORKING_DIRS lists every directory that must exist before a conversion
- params.xml is rewritten for every request, never appended to
- All tunables can be overridden via environment variables
"""

from __future__ import annotations

import os

from dotenv import load_dotenv

load_dotenv()

# ---------------------------------------------------------------------------
# Staging layout inside the engine's virtual filesystem
# ---------------------------------------------------------------------------

WORKING_DIR = "/working"
MEDIA_DIR = "/working/media"
FONTS_DIR = "/working/fonts"
THEMES_DIR = "/working/themes"
PARAMS_PATH = "/working/params.xml"

WORKING_DIRS: tuple[str, ...] = (WORKING_DIR, MEDIA_DIR, FONTS_DIR, THEMES_DIR)
"""Directories created once when the engine becomes ready (parents first)."""

FONT_DIR_PARAM = FONTS_DIR + "/"
"""Value of <m_sFontDir> in PDF parameter documents (trailing slash expected)."""

MAX_BASE_NAME_LENGTH = 200

# ---------------------------------------------------------------------------
# Engine configuration
# ---------------------------------------------------------------------------

ENGINE_ENTRYPOINT = os.getenv("X2T_ENGINE_ENTRYPOINT", "main1")
INIT_TIMEOUT_S = float(os.getenv("X2T_INIT_TIMEOUT", "300"))

# ---------------------------------------------------------------------------
# HTTP API
# ---------------------------------------------------------------------------

API_HOST = os.getenv("X2T_API_HOST", "0.0.0.0")
API_PORT = int(os.getenv("X2T_API_PORT", "8000"))

# Lifetime of bins and media served under /blobs (seconds)
BLOB_TTL_S = float(os.getenv("X2T_BLOB_TTL", "3600"))
BLOB_CLEANUP_INTERVAL_S = 300


def load_engine_module_name() -> str:
    """Return the import name of the engine binding module.

    WHY: The engine is an external native component; which Python binding
    exposes it is a deployment decision, not something to hardcode.

    HOW: Reads X2T_ENGINE_MODULE from os.environ (populated by python-dotenv).

    RULES:
    - Raises ValueError if the variable is missing or empty
    """
    name = os.getenv("X2T_ENGINE_MODULE", "").strip()
    if not name:
        raise ValueError(
            "Conversion engine not configured. "
            "Set X2T_ENGINE_MODULE to the engine binding module in the .env file."
        )
    return name
