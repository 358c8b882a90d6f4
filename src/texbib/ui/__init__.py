"""User-facing interfaces built on top of the resolution engine."""
