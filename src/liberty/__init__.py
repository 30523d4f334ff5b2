"""Server configuration readers and writers."""
