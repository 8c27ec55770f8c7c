"""Markdown scanning: block classification, headings, links and slugs."""
