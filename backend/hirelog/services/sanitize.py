"""
Free-text sanitizer applied before any text is persisted.
"""

import re
from typing import Optional

# Whole <script> blocks, including their content, across line breaks
SCRIPT_BLOCK_PATTERN = re.compile(r"<script.*?>.*?</script>", re.IGNORECASE | re.DOTALL)


def sanitize_text(value: Optional[str]) -> str:
    """Strip script blocks and surrounding whitespace."""
    if not value:
        return ""
    return SCRIPT_BLOCK_PATTERN.sub("", value).strip()
