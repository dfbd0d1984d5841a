"""site_walker.parser: HTML extraction helpers."""
