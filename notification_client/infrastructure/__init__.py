"""Infrastructure adapters: store client, persistence and fan-out."""
