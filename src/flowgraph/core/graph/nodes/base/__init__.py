"""Base node classes."""
