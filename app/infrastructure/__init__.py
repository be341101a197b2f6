"""Infrastructure: persistence, cache, messaging, security."""
