"""GitHunter HTTP API layer.

This package provides the Falcon Asynchronous Server Gateway Interface
(ASGI) application for the GitHunter HTTP surface.

Usage
-----
Create and run the application::

    from githunter.api import create_app

    app = create_app()              # health-only mode
    app = create_app(dependencies)  # profile and analysis endpoints

Public API
----------
create_app
    Application factory that configures the Falcon ASGI app.
AppDependencies
    Collaborators injected into the resources.
"""

from githunter.api.app import AppDependencies, create_app

__all__ = ["AppDependencies", "create_app"]
