"""Session module: owns the lifecycle of the shared data sources."""

from modules.session.service import SessionObservers

__all__ = ["SessionObservers"]
