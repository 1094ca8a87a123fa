"""Core engine: manifest, install, removal, and undo stack."""
