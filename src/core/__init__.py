"""Core logic for hash-checker: file access, digest computation and validation state."""
