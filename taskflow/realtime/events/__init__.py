"""Server-side realtime publishers.

These modules contain *publish* helpers only (decode payload + route).
They must not define Socket.IO server instances or connection handlers.
"""
