"""Mini README: Interfaces (HTTP) for the dispatch controller.

Exports the FastAPI application factory serving the drone API. Other
transports should call ``dronedispatch.controller.DispatchController`` the
same way the web module does.
"""

from .web_app import create_application

__all__ = ["create_application"]
