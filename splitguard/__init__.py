"""
Splitguard - Input & Split Validation Engine

The entry-validation core of a shared-expense (bill-splitting) client.
Decides whether raw form input is acceptable before an expense, group
or profile is handed to storage.

DESIGN PRINCIPLES:
1. Rules are pure: same input, same outcome, no I/O
2. Invalid input is an outcome, not an exception
3. Every failure names the rule that rejected it
4. No silent corrections: rules report, callers decide
5. Rule tables are values, never process-wide singletons
"""

__version__ = "1.0.0"
__author__ = "Splitguard Team"
