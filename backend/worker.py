import logging

from rq import SimpleWorker, Queue

from studio.core.logging import configure_logging
from studio.core.queue import RENDER_QUEUE_NAME
from studio.core.redis import redis_client

listen = [RENDER_QUEUE_NAME]

logger = logging.getLogger("studio.worker")

if __name__ == '__main__':
    configure_logging()

    queues = [Queue(name, connection=redis_client) for name in listen]
    worker = SimpleWorker(queues, connection=redis_client)
    logger.info("[Worker] Listening on queues: %s", listen)
    worker.work()
