"""
tagging-rugby: terminal annotation tool for rugby video.

Notes, tackles and clips are captured against an external mpv player
and stored in a local SQLite database.
"""

__version__ = "0.1.0"
