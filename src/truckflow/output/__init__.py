"""Output layer: Rich, JSON, and wire-envelope rendering of ServiceResult."""
