"""Statement modules: orchestration on top of the pure mapping engines."""
