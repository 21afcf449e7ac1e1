"""Realtime infrastructure (Socket.IO gateway, presence, event routing).

Task status, priority, assignment, creation and deletion updates are pushed
to connected clients from one process-wide Socket.IO server.
"""
