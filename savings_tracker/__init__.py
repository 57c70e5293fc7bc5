"""Console entry point for the savings ledger."""
