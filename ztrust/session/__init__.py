"""
ZTrust Session Module

The session state machine and the controller that owns the session
aggregate.
"""

from ztrust.session.controller import SessionController

__all__ = ["SessionController"]
