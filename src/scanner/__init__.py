"""External API scanner result handling."""
