"""
sptzx - ephemeral file sharing service.

Uploads are exposed through signed, time-limited capability URLs and are
deleted automatically once their lifetime elapses.
"""

__version__ = "1.0.0"
