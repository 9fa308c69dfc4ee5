"""
HTTP and WebSocket interface for the workflow canvas.
"""
