"""Server-wide configuration constants for Deepdelve Server."""

import os

DATA_DIR = os.environ.get("DATA_DIR", ".")  # Persistent data directory
SAVE_FILE = os.path.join(DATA_DIR, "deepdelve.json")
LOG_LEVEL = os.environ.get("LOG_LEVEL", "INFO")

BASE_ABILITY_SCORE = 8       # Every ability starts here before point buy
ABILITY_POINTS = 10          # Points a new character distributes
STARTING_GOLD = 100
SHORT_RESTS_PER_LONG_REST = 2
MAX_EQUIPPED_JEWELRY = 3
LOW_HEALTH_THRESHOLD = 5     # Monsters below this reach for a potion

# Experience needed to reach level n + 1
EXPERIENCE_THRESHOLDS = [
    100, 600, 2000, 6500, 8500, 14000, 23000, 34000, 48000, 64000, 85000, 100000,
]

# POST /encounter/auto may import "module:function" decision scripts
ALLOW_SCRIPTS = os.environ.get("ALLOW_SCRIPTS", "0") == "1"
