"""Pre-compiled regex patterns for the insights dashboard.

All patterns are compiled once at module import.

Usage:
    from utils.patterns import UNSAFE_ID_CHARS

    UNSAFE_ID_CHARS.sub("-", chart_id)
"""

import re

# Characters that are unsafe inside a generated SVG/HTML id attribute
UNSAFE_ID_CHARS = re.compile(r'[^A-Za-z0-9_-]+')
