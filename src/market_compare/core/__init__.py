"""Core application components: configuration, exceptions, events, middleware."""
