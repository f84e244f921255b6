"""Configuration, storage, logging and credential helpers."""
