"""Admin API tools registered by ``core.registry``."""
