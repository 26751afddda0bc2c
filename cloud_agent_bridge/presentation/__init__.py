"""Presentation layer (HTTP routers not tied to a chat platform)."""
