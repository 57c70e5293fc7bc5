"""Flask API package for the savings ledger."""
