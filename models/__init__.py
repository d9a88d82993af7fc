"""Request models for the claim-form PDF service."""
