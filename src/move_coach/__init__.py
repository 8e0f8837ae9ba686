"""
move-coach: weekly strength planning for grapplers.

Infers movement constraints from injuries, picks a focus per training day,
renders sessions from a YAML template library, and adapts loads and
volume from readiness, pain and last week's logs.
"""

__version__ = "0.1.0"
