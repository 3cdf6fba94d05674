"""Version 1 of the conversion API."""
