from typing import Dict, Iterable

from asyncio_multisubscriber_queue import MultisubscriberQueue

class ListenerQueues:
    "Fan-out queues for pushing state changes to listeners, keyed by topic."
    queuesByTopic: Dict[str, MultisubscriberQueue]

    def __init__(self):
        self.queuesByTopic = {}

    def queue_context(self, topic: str):
        if topic not in self.queuesByTopic:
            self.queuesByTopic[topic] = MultisubscriberQueue()
        return self.queuesByTopic[topic].queue()

    async def notify(self, topics: Iterable[str], update):
        # Topics nobody ever listened to are skipped.
        for topic in topics:
            if topic in self.queuesByTopic:
                await self.queuesByTopic[topic].put(update)
