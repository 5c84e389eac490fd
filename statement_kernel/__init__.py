"""
Statement Kernel

Core value types for mapping a trial balance onto financial statement lines:
- Account records and category derivation
- Data-driven mapping rules and rule-set snapshots
- Statement sections and coverage reports
- Typed exceptions and structured logging
"""

__version__ = "0.1.0"
