"""Token codec, entity and parser."""
