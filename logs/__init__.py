"""Tool activity ledger."""
