"""
Timesheet Kernel

Shared foundation for the timesheet visibility and overtime policy engine:
- Immutable domain value objects
- Tolerant coercion of raw record fields
- Typed exceptions with machine-readable codes
- Structured JSON logging
"""

__version__ = "0.1.0"
