"""Audit app package.

Immutable reservation audit trail. ``apps.audit.ledger.AuditLedger`` is the
only writer; entries are removed solely by the retention sweep.
"""
