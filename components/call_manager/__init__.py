"""Call manager components package."""
from .phone_list import parse_phone_list, read_uploaded_file

__all__ = [
    "parse_phone_list",
    "read_uploaded_file",
]
