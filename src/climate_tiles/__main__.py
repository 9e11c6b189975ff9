"""
Main entry point for climate-tiles.
Usage: python -m climate_tiles
"""

from .cli import app

if __name__ == "__main__":
    app(prog_name="climate-tiles")
