"""
Autotile Constants

Limits and defaults shared by the tiling state, the algorithms and the engine.
"""

# Split ratio (fraction of the content width given to the master area)
MIN_SPLIT_RATIO = 0.1
MAX_SPLIT_RATIO = 0.9
DEFAULT_SPLIT_RATIO = 0.6

# Number of windows in the master area
MIN_MASTER_COUNT = 1
MAX_MASTER_COUNT = 5
DEFAULT_MASTER_COUNT = 1

# Gaps in pixels
MIN_GAP = 0
MAX_GAP = 50
DEFAULT_GAP = 8

# Smallest region an algorithm keeps splitting
MIN_ZONE_SIZE_PX = 50

# Two edges closer than this are treated as touching
GAP_EDGE_THRESHOLD_PX = 5

# Extra reach for the minimum-size post-pass beyond the inner gap
MIN_SIZE_POST_PASS_SLACK_PX = 12

MAX_WINDOWS_PER_SCREEN = 50

SETTINGS_RETILE_DEBOUNCE_MS = 100

DEFAULT_RATIO_STEP = 0.05

# Algorithm previews
PREVIEW_SIZE = 1000
PREVIEW_WINDOW_COUNT = 3

# Algorithm ids
MASTER_STACK = "master-stack"
COLUMNS = "columns"
ROWS = "rows"
BSP = "bsp"
FIBONACCI = "fibonacci"
MONOCLE = "monocle"
THREE_COLUMN = "three-column"

AUTOTILE_ID_PREFIX = "autotile:"
