"""
Tracker Kernel

Domain layer for freelancer time-tracking analytics:
- Immutable time entry, project and client value objects
- Analytics filter and result snapshots
- Injectable clock
- Typed exceptions and structured JSON logging
"""

__version__ = "0.1.0"
