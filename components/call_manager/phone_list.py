"""Phone list importer for the call manager.

Upload format: plain text, one entry per line, comma separated fields
``id,number,name,notes``. A first line containing "id" is a header.
"""
from typing import List, Optional
import logging

from services.models import CallTarget

logger = logging.getLogger(__name__)


def _field(fields: List[str], position: int) -> Optional[str]:
    if position >= len(fields):
        return None
    value = fields[position].strip()
    return value or None


def parse_phone_list(content: str) -> List[CallTarget]:
    """Parse uploaded text into call targets.

    Args:
        content: Raw text of the uploaded file

    Returns:
        Targets in file order. Lines without a number are skipped; a missing
        id becomes ``id-<line index>``.
    """
    lines = content.split('\n')

    # Skip header row if present
    start_index = 1 if 'id' in lines[0] else 0

    targets = []
    skipped = 0
    for i in range(start_index, len(lines)):
        line = lines[i].strip()
        if not line:
            continue

        fields = line.split(',')[:4]
        number = _field(fields, 1)
        if not number:
            skipped += 1
            continue

        targets.append(CallTarget(
            id=_field(fields, 0) or f"id-{i}",
            number=number,
            name=_field(fields, 2),
            notes=_field(fields, 3),
        ))

    logger.info(f"Parsed {len(targets)} phone numbers ({skipped} lines without a number skipped)")
    return targets


def read_uploaded_file(uploaded_file) -> str:
    """Read a Streamlit UploadedFile as text.

    Args:
        uploaded_file: Streamlit UploadedFile object (or any object with getvalue())

    Returns:
        Decoded file content
    """
    raw = uploaded_file.getvalue()
    if isinstance(raw, str):
        return raw
    return raw.decode('utf-8-sig', errors='replace')
