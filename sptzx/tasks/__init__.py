"""Background tasks."""

from .cleanup_task import ExpirySweeper

__all__ = ["ExpirySweeper"]
