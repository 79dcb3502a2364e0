"""HTTP API for Tutorbook."""
