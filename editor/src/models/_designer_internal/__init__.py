"""Internal helpers shared by the block and pattern designers (not public API)."""
