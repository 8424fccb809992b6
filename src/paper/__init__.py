"""Question paper navigation core.

The paper layer holds the node sequence of a question paper and resolves typed intents (read,
write, meta) into node positions, annotations (marked/skipped/notes), and responses.
"""
