"""Mini README: Interactive interfaces for Station Clock.

Exports the FastAPI application factory that powers the browser-based
control desk. The Typer CLI lives in ``main_control_desk.py`` at the
repository root.
"""

from .web_app import create_application

__all__ = ["create_application"]
