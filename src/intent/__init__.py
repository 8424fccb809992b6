"""Intent model and validation.

The intent layer defines the typed commands (read, write, meta) that an external parser produces
and the question paper consumes.
"""
