"""Idle session WebSocket endpoint (/ws)."""
