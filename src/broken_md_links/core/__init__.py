"""Enums and exception types shared by the checker packages."""
