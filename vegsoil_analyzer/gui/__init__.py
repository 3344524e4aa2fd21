"""Qt front end for the analyzer."""

from .app import run_app

__all__ = ["run_app"]
