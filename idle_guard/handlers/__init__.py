"""WebSocket admission, rate limiting and message handling."""
