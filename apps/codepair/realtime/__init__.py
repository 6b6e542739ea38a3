"""Realtime infrastructure (Socket.IO server wiring and the matching client).

Domain rules live in `codepair.services`; this package only adapts them to
python-socketio.
"""
