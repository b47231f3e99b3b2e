"""Route-level wrappers for the Dooray REST API, one module per resource."""
