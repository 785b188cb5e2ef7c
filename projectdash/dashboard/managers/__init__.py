"""Data access managers for the project dashboard.

Managers encapsulate reads, mutations and business rules over the stored
project list.  They raise domain exceptions (``LookupError``,
``ValueError``), never CLI exceptions -- that translation is the CLI's
responsibility.
"""
