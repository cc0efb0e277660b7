"""Utility exports for thread hand-off and cancellation helpers."""

from prefsort.utils.concurrency import CancellationToken, ReplySlot, RequestMailbox

__all__ = [
    "CancellationToken",
    "ReplySlot",
    "RequestMailbox",
]
