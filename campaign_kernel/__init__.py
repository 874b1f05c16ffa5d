"""
Campaign Kernel

Entities, value helpers, clock, typed exceptions and structured logging
for the campaign funding engine:
- Project, Contribution, Payout and ProjectTotal entities
- Decimal-only amounts
- Injectable clock
- Typed, machine-readable errors
"""

__version__ = "0.1.0"
