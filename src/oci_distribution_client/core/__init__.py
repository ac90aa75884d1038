"""Core client components: config, session, auth, version check."""
