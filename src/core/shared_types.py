"""
Type definitions used across layers
"""

from enum import StrEnum

# --- The domain layer (src/oxono) has its own Enum versions of Shape and Phase.
# --- These string versions are what crosses the boundary to a presentation layer. Convert by member name.


class Shape(StrEnum):
    CROSS = "cross"
    CIRCLE = "circle"


class Phase(StrEnum):
    MOVE = "move"
    INSERT = "insert"
    CHOICE = "choice"
