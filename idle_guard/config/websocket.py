"""WebSocket protocol configuration and constants."""

from __future__ import annotations

WS_ENDPOINT_PATH = "/ws"

# Envelope keys
WS_KEY_TYPE = "type"
WS_KEY_SESSION_ID = "session_id"
WS_KEY_REQUEST_ID = "request_id"
WS_KEY_PAYLOAD = "payload"

WS_UNKNOWN_SESSION_ID = "unknown"
WS_UNKNOWN_REQUEST_ID = "unknown"

# Close codes
WS_CLOSE_CLIENT_REQUEST_CODE = 1000
WS_CLOSE_UNAUTHORIZED_CODE = 4001
WS_CLOSE_BUSY_CODE = 4002
WS_CLOSE_IDLE_LOGOUT_CODE = 4003

WS_CLOSE_IDLE_LOGOUT_REASON = "idle logout"

# Receive poll: how often the message loop checks whether the tab was logged out.
WS_RECEIVE_POLL_S: float = 1.0

# Outbound message types
WS_MSG_IDLE_STATE = "idle.state"
WS_MSG_SIGNED_OUT = "signed_out"
WS_MSG_NAVIGATE = "navigate"
WS_MSG_ERROR = "error"

# Control frames that never count against the message rate limit
WS_UNLIMITED_MESSAGE_TYPES = frozenset({"ping", "pong", "end"})

# Errors (payload.code values)
WS_ERROR_AUTH_FAILED = "authentication_failed"
WS_ERROR_SERVER_AT_CAPACITY = "server_at_capacity"
WS_ERROR_INVALID_MESSAGE = "invalid_message"
WS_ERROR_INVALID_PAYLOAD = "invalid_payload"
WS_ERROR_RATE_LIMITED = "rate_limited"

__all__ = [
    "WS_CLOSE_BUSY_CODE",
    "WS_CLOSE_CLIENT_REQUEST_CODE",
    "WS_CLOSE_IDLE_LOGOUT_CODE",
    "WS_CLOSE_IDLE_LOGOUT_REASON",
    "WS_CLOSE_UNAUTHORIZED_CODE",
    "WS_ENDPOINT_PATH",
    "WS_ERROR_AUTH_FAILED",
    "WS_ERROR_INVALID_MESSAGE",
    "WS_ERROR_INVALID_PAYLOAD",
    "WS_ERROR_RATE_LIMITED",
    "WS_ERROR_SERVER_AT_CAPACITY",
    "WS_KEY_PAYLOAD",
    "WS_KEY_REQUEST_ID",
    "WS_KEY_SESSION_ID",
    "WS_KEY_TYPE",
    "WS_MSG_ERROR",
    "WS_MSG_IDLE_STATE",
    "WS_MSG_NAVIGATE",
    "WS_MSG_SIGNED_OUT",
    "WS_RECEIVE_POLL_S",
    "WS_UNKNOWN_REQUEST_ID",
    "WS_UNKNOWN_SESSION_ID",
    "WS_UNLIMITED_MESSAGE_TYPES",
]
