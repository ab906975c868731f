"""
Edge Function Probe
Calls deployed edge functions directly over HTTP and prints what comes back.

Usage:
  python scripts/probe_functions.py                      # probe the default list
  python scripts/probe_functions.py fetch-environments   # probe specific functions
  python scripts/probe_functions.py --normalized         # go through the async gateway instead

Requires EDGE_FUNCTIONS_URL and SUPABASE_ANON_KEY in .env.
"""
import argparse
import asyncio
import json
import logging
import os
import sys

# Add project root to path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

import requests
from dotenv import load_dotenv
load_dotenv()

from services.edge_functions import EdgeFunctionClient

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
)

DEFAULT_FUNCTIONS = [
    "discover-notion-databases",
    "fetch-environments",
    "fetch-campaigns",
    "fetch-sessions",
    "fetch-creatures",
    "generate-encounter",
]

SAMPLE_PAYLOADS = {
    "fetch-creatures": {"environment": "Any"},
    "fetch-campaigns": {"searchQuery": "", "activeOnly": False},
    "fetch-sessions": {"searchQuery": ""},
    "generate-encounter": {
        "environment": "Any",
        "xpThreshold": 100,
        "maxMonsters": 3,
        "minCR": 0,
        "maxCR": 2,
        "alignment": "Any",
        "creatureType": "Any",
        "size": "Any",
    },
}


def probe_raw(base, key, name, timeout=30):
    headers = {
        "Content-Type": "application/json",
        "Authorization": f"Bearer {key}",
        "apikey": key,
    }
    try:
        r = requests.post(f"{base}/{name}", headers=headers,
                          json=SAMPLE_PAYLOADS.get(name, {}), timeout=timeout)
        return r.status_code, r.text[:300]
    except requests.RequestException as e:
        return -1, str(e)


async def probe_normalized(names):
    async with EdgeFunctionClient() as client:
        for name in names:
            result = await client.invoke(name, SAMPLE_PAYLOADS.get(name))
            mark = "OK  " if result.success else "FAIL"
            detail = json.dumps(result.data, default=str)[:200] if result.success else result.error
            print(f"  {mark} {name} -> {detail}")


def main():
    parser = argparse.ArgumentParser(description="Probe deployed edge functions.")
    parser.add_argument("functions", nargs="*", help="Function names (default: common set)")
    parser.add_argument("--normalized", action="store_true",
                        help="Call through EdgeFunctionClient and print normalized results")
    args = parser.parse_args()

    names = args.functions or DEFAULT_FUNCTIONS
    base = os.getenv("EDGE_FUNCTIONS_URL", "").rstrip("/")
    key = os.getenv("SUPABASE_ANON_KEY", "")
    if not base:
        print("ERROR: EDGE_FUNCTIONS_URL not set in .env")
        sys.exit(1)

    print("=" * 60)
    print(f"EDGE FUNCTIONS @ {base}")
    print("=" * 60)

    if args.normalized:
        asyncio.run(probe_normalized(names))
        return

    for name in names:
        code, txt = probe_raw(base, key, name)
        print(f"  POST /{name} -> {code}: {txt[:150]}")


if __name__ == "__main__":
    main()
