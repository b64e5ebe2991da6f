from __future__ import annotations

from redis import Redis
from rq import Worker

from catalog_admin.config import settings


def main() -> None:
    if not settings.redis_url:
        raise SystemExit("REDIS_URL is required to run worker (or set CATALOG_QUEUE_MODE=inline).")
    redis_conn = Redis.from_url(settings.redis_url)
    print(f"[catalog-worker] listening on queue={settings.rq_queue}")
    worker = Worker([settings.rq_queue], connection=redis_conn)
    worker.work(with_scheduler=False)


if __name__ == "__main__":
    main()
