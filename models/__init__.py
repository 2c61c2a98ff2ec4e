"""MongoDB connection and collection access."""
