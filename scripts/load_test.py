"""Async load generator for the gateway endpoints.

Drives either `/orders` or `/send-email` and reports latency percentiles
plus a breakdown of caller-facing error codes, so provider rejections and
outages can be told apart from validation failures.
"""

import argparse
import asyncio
import random
import time
from collections import Counter
from uuid import uuid4

import httpx


def order_payload(i: int) -> dict:
    return {"amountMinorUnits": random.randint(100, 250000)}


def otp_payload(i: int) -> dict:
    return {
        "recipientEmail": f"load-{i % 500}@example.com",
        "code": f"{random.randint(0, 999999):06d}",
        "serviceIdentifier": "service_load",
        "templateIdentifier": "template_load",
        "accountIdentifier": "user_load",
    }


PAYLOADS = {"orders": order_payload, "send-email": otp_payload}


def error_label(resp: httpx.Response) -> str:
    """Reduce a reply to the caller-facing error code, or the status when absent."""

    if resp.status_code < 300:
        return "ok"
    try:
        body = resp.json()
    except ValueError:
        return f"http_{resp.status_code}"
    error = body.get("error") if isinstance(body, dict) else None
    if isinstance(error, dict) and error.get("code"):
        return str(error["code"])
    return f"http_{resp.status_code}"


async def send_one(client: httpx.AsyncClient, base_url: str, endpoint: str, i: int) -> tuple[str, float]:
    started = time.perf_counter()
    try:
        resp = await client.post(
            f"{base_url}/{endpoint}",
            json=PAYLOADS[endpoint](i),
            headers={"x-correlation-id": str(uuid4())},
        )
        label = error_label(resp)
    except httpx.HTTPError as exc:
        label = type(exc).__name__
    return label, (time.perf_counter() - started) * 1000


def percentile(values: list[float], p: float) -> float:
    if not values:
        return 0.0
    ordered = sorted(values)
    idx = min(len(ordered) - 1, max(0, int((p / 100.0) * len(ordered)) - 1))
    return ordered[idx]


async def run(total: int, concurrency: int, base_url: str, endpoint: str) -> None:
    """Execute a bounded-concurrency load run and print summary stats."""

    sem = asyncio.Semaphore(concurrency)

    async with httpx.AsyncClient(timeout=30.0) as client:
        async def worker(i: int):
            async with sem:
                return await send_one(client, base_url, endpoint, i)

        results = await asyncio.gather(*(worker(i) for i in range(total)))

    labels = Counter(label for label, _ in results)
    ok_latencies = [latency for label, latency in results if label == "ok"]
    errors = total - labels["ok"]

    print(f"endpoint=/{endpoint} total={total} success={labels['ok']} errors={errors}")
    print(f"error_rate={(errors / total) * 100:.2f}%")
    for label, count in labels.most_common():
        if label != "ok":
            print(f"  {label}={count}")
    for p in (50, 95, 99):
        print(f"p{p}_ms={percentile(ok_latencies, p):.2f}")


if __name__ == "__main__":
    parser = argparse.ArgumentParser()
    parser.add_argument("--endpoint", choices=sorted(PAYLOADS), default="orders")
    parser.add_argument("--total", type=int, default=200)
    parser.add_argument("--concurrency", type=int, default=20)
    parser.add_argument("--base-url", default="http://localhost:8000")
    args = parser.parse_args()
    asyncio.run(run(args.total, args.concurrency, args.base_url, args.endpoint))
