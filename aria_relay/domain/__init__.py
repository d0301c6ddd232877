"""Domain models and the static persona registry."""
