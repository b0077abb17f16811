"""Vision and input configuration constants.

Defaults for the capture-search-act loop. Session values can be overridden
through ConfigManager (see core.config) or the Bot setters.
"""
import cv2

# Minimum normalized correlation accepted as a match (TM_CCOEFF_NORMED)
MATCH_THRESHOLD = 0.8

# Captures per second while searching
DEFAULT_SAMPLE_RATE = 3.0

# Capture pixels per injection point (1: standard screen, 2: Retina-like)
DEFAULT_HIGH_DPI_RATIO = 2

# Seconds between pointer move and button press/release
DEFAULT_WAIT_TIME = 0.09

# Vertical offset (capture pixels) of the click used to activate a window
ACTIVATE_TITLE_OFFSET = 20

# BGRA -> gray, weights 0.299 R + 0.587 G + 0.114 B. Templates are decoded
# with IMREAD_GRAYSCALE, which uses the same weights.
GRAYSCALE_CONVERSION = cv2.COLOR_BGRA2GRAY
