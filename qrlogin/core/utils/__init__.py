"""Small request helpers."""
