"""Infrastructure layer: durable storage, HTTP access and REST repositories."""
