"""Domain model parts (one type per module)."""
