"""Asyncio building blocks for Raft: log storage, snapshot streams, quorum waiting and query queues."""

__version__ = "0.1.0"

__all__ = [
    "file_storage",
    "memory_storage",
    "query_queue",
    "quorum",
    "simple",
    "snapshot",
    "snapshot_queue",
    "storage",
    "taskdrop",
]