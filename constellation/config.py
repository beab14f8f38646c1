"""
Single place for default game/setup configuration.
Environment variables override the values a local deployment usually changes.
"""

import os

# Menu presets: number of stars on the board.
GAME_SIZES = {
    "quick": 15,
    "medium": 25,
    "long": 35,
}
DEFAULT_POINT_COUNT = 30
# Upper bound accepted from the view; keeps point placement cheap.
MAX_POINT_COUNT = 2 * max(GAME_SIZES.values())

# Board size used when the view does not report its layout.
DEFAULT_BOARD_WIDTH = 800
DEFAULT_BOARD_HEIGHT = 600

DEFAULT_DIFFICULTY = "medium"

# Comma-separated list, e.g. "http://localhost:5173,http://localhost:3000"
CORS_ORIGINS = [
    o.strip()
    for o in os.environ.get(
        "CONSTELLATION_CORS_ORIGINS",
        "http://localhost:5173,http://localhost:5174,http://localhost:3000",
    ).split(",")
    if o.strip()
]

LOG_LEVEL = os.environ.get("CONSTELLATION_LOG_LEVEL", "INFO").upper()
