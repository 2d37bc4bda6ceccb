"""Key algorithms, encoding, persistence and the generation pipeline."""
