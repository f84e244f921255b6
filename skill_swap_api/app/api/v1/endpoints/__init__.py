"""Domain routers for API v1: auth, users, swaps and admin."""
