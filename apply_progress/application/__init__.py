"""Application layer: presentation model and service orchestration."""
