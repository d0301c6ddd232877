"""Request pipelines."""
