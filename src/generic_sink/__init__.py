"""generic_sink: deliver batches of aggregated metrics as JSON to an HTTP collector."""

__version__ = "0.1.0"
