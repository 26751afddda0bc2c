"""Domain layer: entities, validation, and the error taxonomy."""
