"""
Configuration settings for Directional Drills.
"""
import os
from dotenv import load_dotenv

load_dotenv()

# Field settings (the renderer normally supplies live bounds)
FIELD_WIDTH = 800
FIELD_HEIGHT = 600
SIM_TICK_HZ = int(os.getenv("DRILLS_SIM_TICK_HZ", "60"))
PROTOTYPE_VERSION = "1.0.0"
GAME_TITLE = f"Directional Drills (v{PROTOTYPE_VERSION})"

# Target settings (radius in px)
TARGET_SIZES = {
    "small": 20,
    "medium": 30,
    "large": 40,
    "extra-large": 50,
}
DEFAULT_TARGET_SIZE = 30

TARGET_COLORS = {
    "static": "#27ae60",
    "moving": "#3498db",
    "flee": "#9b59b6",
    "bonus": "#f39c12",
    "hazard": "#e74c3c",
}

TARGET_POINTS = 100
BONUS_POINTS = 200
BONUS_TIME_SECONDS = 5
BONUS_MULTIPLIER = 2
HAZARD_PENALTY_SECONDS = 5
FLEE_SPEED = 1.5
FLEE_DETECTION_FACTOR = 4

# Motion (px/s)
MOVING_BASE_SPEED = 40
FLEE_BASE_SPEED = 90
CALM_MODE_FACTOR = 0.5

# Placement
PLACEMENT_MAX_ATTEMPTS = 50
PLACEMENT_EDGE_MARGIN = 20
PLAYER_CLEARANCE_FACTOR = 3.0
TARGET_SPACING_FACTOR = 2.5
OVERLAY_WIDTH = 160
OVERLAY_HEIGHT = 60

# Resize
RESIZE_TARGET_MARGIN = 10  # extra px kept between a target edge and the field edge
RESIZE_COMPRESS_RATIO = 0.7  # shrinking below this share of a side compresses the layout

# Player settings
PLAYER_DEFAULT_SIZE = 25
PLAYER_STEP_FACTOR = 2  # px per tick per speed level
TRAIL_LENGTHS = {
    "short": 15,
    "long": 40,
    "off": 0,
}
TRAIL_FADE_MS = 2000

# Dwell mode
DWELL_TICK_MS = 16  # approximate frame time credited per contact tick

# Replay codes
REPLAY_CODE_VERSION = os.getenv("DRILLS_REPLAY_VERSION", "v2")
PREFIX_COLORS = ["BLUE", "RED", "GREEN", "GOLD", "PURPLE", "ORANGE", "TEAL", "PINK"]
PREFIX_SHAPES = ["CIRCLE", "STAR", "SQUARE", "TRIANGLE", "DIAMOND", "HEART", "MOON", "CLOUD"]

# Session history
HISTORY_LIMIT = 10
HISTORY_PATH = os.getenv("DRILLS_HISTORY_PATH", "")
PERSONAL_BEST_AVERAGE_FACTOR = 1.1

# Diagnostics
DEBUG = os.getenv("DRILLS_DEBUG", "").strip().lower() in ("1", "true", "yes", "on")
