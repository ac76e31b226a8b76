"""
Terminal UI for tagging-rugby.

Model holds the state and handles messages; view renders it; app drives
both from textual.
"""
