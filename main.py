"""
tagging-rugby entry point

Run with: python main.py open match.mp4
Or once installed: tagging-rugby open match.mp4
"""

from tagging_rugby.cli import app

if __name__ == "__main__":
    app()
