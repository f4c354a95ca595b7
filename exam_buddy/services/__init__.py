"""
Service layer sitting between the HTTP routers and the core.
"""

from .intake_service import IntakeService

__all__ = ["IntakeService"]
