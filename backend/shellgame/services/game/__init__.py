"""Game domain services: round state machine, timers and side picking.

This package contains the core game mechanics and should be imported by
socket handlers and CLI commands, keeping transport concerns separated
from the state machine.
"""
