"""
Extraction ID Utilities
Generate unique IDs for correlating palette extraction log lines.
"""
import uuid
from datetime import datetime


def generate_extraction_id(prefix: str = "palette") -> str:
    """
    Generate a unique extraction ID for tracking.

    Returns:
        ID string of the form ``<prefix>-<YYYYmmddHHMMSS>-<8 hex chars>``
    """
    timestamp = datetime.now().strftime("%Y%m%d%H%M%S")
    short_uuid = uuid.uuid4().hex[:8]
    return f"{prefix}-{timestamp}-{short_uuid}"
