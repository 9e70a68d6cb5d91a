"""Infrastructure adapters: AWS stores and HTTP response streaming."""
