"""HTTP API for render collaborators."""
