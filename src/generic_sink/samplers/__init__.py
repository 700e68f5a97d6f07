"""Internal metric sample types and helpers."""
