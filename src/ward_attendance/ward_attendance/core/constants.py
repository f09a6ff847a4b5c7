"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

from datetime import time

DEFAULT_WINDOW_START = time(6, 0)
DEFAULT_WINDOW_END = time(11, 0)
DEFAULT_ABSENT_CUTOFF_HOUR = 9
MIN_POLYGON_VERTICES = 3
MYSQL_DUPLICATE_KEY_ERRNO = 1062
