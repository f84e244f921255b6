"""Version 1 of the Skill Swap API."""
