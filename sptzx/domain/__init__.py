"""Domain layer: entities, registry, capability signing and errors."""
