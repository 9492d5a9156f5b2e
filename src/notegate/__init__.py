"""
NoteGate Backend - Private, Shared and Public Notes

Notes belong to one owner, can be shared with named collaborators at read or
write level, and can be published anonymously through an unguessable link.

Version: 1.0.0
"""

__version__ = "1.0.0"
