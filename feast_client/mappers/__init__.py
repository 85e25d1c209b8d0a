"""Translation between user-facing rows and serving API messages."""
