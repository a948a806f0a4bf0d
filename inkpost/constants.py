"""
Inkpost — Shared Wire Constants
================================

Values both the backend and inkpost.client depend on. Kept free of
SQLAlchemy and FastAPI imports so the client can use them on its own.
"""

# Content a comment with replies is left holding after its author deletes it.
DELETED_MARKER = "[This comment has been deleted]"

COMMENT_DELETED_MESSAGE = "Comment deleted successfully"
COMMENT_SOFT_DELETED_MESSAGE = "Comment content deleted successfully"
