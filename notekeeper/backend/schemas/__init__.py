"""Request and response schemas, one module per resource plus the shared envelope."""
