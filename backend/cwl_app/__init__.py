"""FastAPI delivery layer for the CWL roster builder."""
