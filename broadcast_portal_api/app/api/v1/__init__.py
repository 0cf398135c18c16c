"""Version 1 of the portal API."""
