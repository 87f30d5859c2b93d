"""Board persistence and the 0/1 wire codec."""

from .board_store import BoardRecord, BoardStore, InMemoryBoardStore, JsonlBoardStore
from .codec import decode_state, encode_state

__all__ = [
    'BoardRecord',
    'BoardStore',
    'InMemoryBoardStore',
    'JsonlBoardStore',
    'decode_state',
    'encode_state',
]
