from .from_now import from_now, parse_offset

__all__ = ["from_now", "parse_offset"]
