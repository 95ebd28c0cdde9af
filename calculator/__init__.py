"""
Keypad Calculator - Source Package

The incremental calculator used by the income tracker's amount fields.
Users tap keys, see a guarded expression, press "=" and then either
use the result in the form or copy it.

DESIGN PRINCIPLES:
1. Typing never evaluates; only "=" does
2. Errors never escape an evaluation, they become the error sentinel
3. No code execution on user text
4. Every interaction is auditable
"""

__version__ = "1.0.0"
__author__ = "Income Tracker Team"
