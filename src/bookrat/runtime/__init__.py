"""Process-level services shared by every layer."""
