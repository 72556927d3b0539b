"""Loyalty Ledger source package.

This package contains the ledger components:
- config: Configuration loading and management
- ledger: Token ledger, ownership registry, administrator gate, and events
"""

from __future__ import annotations

__all__: list[str] = []
