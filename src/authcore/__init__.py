"""authcore - authentication core.

Verifies credentials, issues and validates signed session tokens, persists
session records and throttles repeated failed logins.
"""

__version__ = "0.1.0"
