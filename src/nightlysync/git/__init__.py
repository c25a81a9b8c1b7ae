"""Version-control access."""
