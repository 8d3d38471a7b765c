"""Camera driver backends."""
