#!/usr/bin/env python3
"""Send a burst of sample operations to a running OpsTracker service.

Used for end-to-end checks of the snapshot and the usage alert path: with
the default 80% threshold, the 12th operation inside one minute fires an
alert.
"""

import asyncio
import random
import sys

import httpx

from opstracker.models.operation import ERROR_STATE_MODEL, LOCAL_ENGINE_MODEL

SAMPLE_OPERATIONS = [
    {"tool": "JPG to PDF", "model": LOCAL_ENGINE_MODEL, "fileFormats": ["jpg", "JPG", "png"]},
    {"tool": "Word to PDF", "model": LOCAL_ENGINE_MODEL, "fileFormats": ["docx"]},
    {"tool": "Compress PDF", "model": LOCAL_ENGINE_MODEL, "fileFormats": ["pdf"]},
    {"tool": "Clean Excel", "model": LOCAL_ENGINE_MODEL, "fileFormats": ["xlsx"]},
    {"tool": "AI Menu Fixer", "model": "gemini-3-flash-preview", "fileFormats": ["xlsx"]},
    {"tool": "AI OCR", "model": "gemini-3-flash-preview", "fileFormats": ["png"]},
    {"tool": "AI Summary", "model": "gemini-3-flash-preview", "fileFormats": ["pdf"]},
]


async def send_operation(client: httpx.AsyncClient, base_url: str, fail: bool) -> dict:
    """Post one sample operation.

    Args:
        client: HTTP client
        base_url: Service base URL
        fail: Report the operation as failed

    Returns:
        Stored record as returned by the service
    """
    sample = random.choice(SAMPLE_OPERATIONS)
    payload = {
        **sample,
        "status": "error" if fail else "success",
        "latencyMs": random.randint(150, 4000),
        "fileCount": len(sample["fileFormats"]),
    }
    if fail:
        payload["model"] = ERROR_STATE_MODEL
        payload["errorMessage"] = "Conversion failed"

    response = await client.post(f"{base_url}/api/v1/operations", json=payload)
    response.raise_for_status()
    record = response.json()["data"]
    print(f"✓ {record['tool']:<16} {record['status']:<8} {record['latencyMs']:>5} ms  id={record['id']}")
    return record


async def send_test_operations(base_url: str, count: int) -> None:
    """Send a burst of operations and print the resulting snapshot.

    Args:
        base_url: Service base URL
        count: Number of operations to send
    """
    async with httpx.AsyncClient(timeout=10.0) as client:
        print(f"Target: {base_url}")
        print("=" * 60)

        for idx in range(count):
            await send_operation(client, base_url, fail=idx % 7 == 6)

        response = await client.get(f"{base_url}/api/v1/stats")
        response.raise_for_status()
        stats = response.json()["data"]

        print("=" * 60)
        print(f"Health:       {stats['health']}")
        print(f"RPM:          {stats['rpm']}/{stats['limit']} ({stats['usagePercent']:.1f}%)")
        print(f"Success rate: {stats['successRate']:.1f}%")
        print(f"Avg latency:  {stats['avgLatencyMs']} ms")
        print(f"Formats:      {stats['formatDistribution']}")

        alerts = [log for log in stats["recentLogs"] if log["isAlert"]]
        for alert in alerts:
            print(f"⚠ {alert['errorMessage']}")


def main():
    """Entry point."""
    base_url = "http://localhost:8000"
    count = 14

    if len(sys.argv) > 1:
        if sys.argv[1] in ["-h", "--help"]:
            print("Usage:")
            print(f"  {sys.argv[0]} [BASE_URL] [COUNT]")
            print()
            print("Example:")
            print(f"  {sys.argv[0]} http://localhost:8000 14")
            return

        base_url = sys.argv[1].rstrip("/")

    if len(sys.argv) > 2:
        count = int(sys.argv[2])

    asyncio.run(send_test_operations(base_url, count))


if __name__ == "__main__":
    main()
