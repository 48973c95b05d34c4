from rq import Queue

from studio.core.redis import redis_client

RENDER_QUEUE_NAME = "render_queue"

render_queue = Queue(RENDER_QUEUE_NAME, connection=redis_client)
