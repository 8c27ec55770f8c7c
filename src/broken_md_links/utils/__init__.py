"""Configuration, logging and path helpers."""
