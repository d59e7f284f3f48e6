"""
In-memory Event Broadcaster Interface

Pub/sub for distributing state-change notifications (wallet state, payment
stages) to whoever observes them inside the same process.
"""

from typing import Protocol

from anyio.streams.memory import MemoryObjectReceiveStream


class IInMemoryEventBroadcaster(Protocol):
    async def subscribe(self, *, topic: str) -> MemoryObjectReceiveStream[dict]:
        """
        Subscribe to a topic

        Args:
            topic: Topic name, e.g. 'wallet_state'

        Returns:
            MemoryObjectReceiveStream that will receive event dictionaries
        """
        ...

    async def broadcast(self, *, topic: str, event_data: dict) -> None:
        """
        Broadcast event to all subscribers of this topic

        Note:
            - Silently ignores if no subscribers exist
            - Drops event if subscriber stream is full (prevents blocking)
        """
        ...

    async def unsubscribe(self, *, topic: str, stream: MemoryObjectReceiveStream[dict]) -> None:
        """Unsubscribe and close the stream pair. Safe to call with unknown streams."""
        ...
