"""HTTP server exposing handbook_lint."""
