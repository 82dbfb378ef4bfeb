#!/usr/bin/env python3
"""
Smoke check against a running server.
Start the server first (python main.py), then run:

    python scripts/smoke_check.py [base_url]
"""

import asyncio
import sys
from datetime import datetime, timezone

import httpx

BASE_URL = sys.argv[1] if len(sys.argv) > 1 else "http://localhost:3000"


async def run_checks() -> tuple[int, int]:
    passed = 0
    failed = 0

    async with httpx.AsyncClient(base_url=BASE_URL, timeout=60.0) as client:
        print("\n📍 Check 1: Health endpoint")
        response = await client.get("/health")
        if response.status_code == 200:
            print(f"✅ Health: {response.json()}")
            passed += 1
        else:
            print(f"❌ Unexpected status code: {response.status_code}")
            failed += 1

        print("\n📍 Check 2: Chat without message is rejected")
        response = await client.post("/chat", json={})
        if response.status_code == 400:
            print(f"✅ Got 400: {response.json()}")
            passed += 1
        else:
            print(f"❌ Expected 400, got {response.status_code}: {response.text}")
            failed += 1

        print("\n📍 Check 3: Chat round trip")
        history = [
            {"author": "user", "content": "Oi!"},
            {"author": "model", "content": "Olá! Como posso ajudar com seu estilo hoje?"},
        ]
        response = await client.post("/chat", json={"message": "Que horas são agora?", "history": history})
        if response.status_code == 200 and response.json().get("response"):
            print(f"✅ Bot replied: {response.json()['response'][:120]}")
            passed += 1
        else:
            print(f"❌ Chat failed with {response.status_code}: {response.text}")
            failed += 1

        print("\n📍 Check 4: Chat histories")
        response = await client.get("/api/chat/historicos")
        if response.status_code == 200 and len(response.json()) <= 20:
            print(f"✅ {len(response.json())} sessions returned")
            passed += 1
        else:
            print(f"❌ Histories failed with {response.status_code}: {response.text}")
            failed += 1

        print("\n📍 Check 5: Log connection")
        response = await client.post("/api/log-connection", json={
            "ip": "203.0.113.10",
            "city": "Smoke Test",
            "timestamp": datetime.now(timezone.utc).isoformat(),
        })
        if response.status_code == 201:
            print(f"✅ Log saved: {response.json()}")
            passed += 1
        else:
            print(f"❌ Log failed with {response.status_code}: {response.text}")
            failed += 1

    return passed, failed


def main() -> int:
    print(f"🚀 Smoke checks against {BASE_URL}")
    print("=" * 60)
    passed, failed = asyncio.run(run_checks())
    print("\n" + "=" * 60)
    print(f"📊 Results: {passed} passed, {failed} failed")
    return 0 if failed == 0 else 1


if __name__ == "__main__":
    sys.exit(main())
