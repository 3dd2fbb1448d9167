"""HTTP primitives: frozen Request, chainable Response, Redirect."""

from switchyard.http.request import Request
from switchyard.http.response import Redirect, Response

__all__ = ["Redirect", "Request", "Response"]
