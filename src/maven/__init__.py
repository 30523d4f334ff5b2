"""Maven build file readers."""
