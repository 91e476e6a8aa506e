#!/usr/bin/env python3
"""Inject quotes into a running instance's file cache, bypassing providers.

Usage:
  put_quote.py SYMBOL PRICE [REFRESHED_AT]
  put_quote.py --file quotes.json        # list of Quote objects

Target instance defaults to http://localhost:4754, override with BNHTTP_URL.
"""
import json
import os
import sys

import requests

API = os.environ.get("BNHTTP_URL", "http://localhost:4754") + "/api/v0"


def put_quote(quote: dict) -> None:
    resp = requests.put(f"{API}/quote", json=quote, timeout=30)
    if resp.status_code != 204:
        body = resp.json()
        raise RuntimeError(f"{body.get('error')}: {body.get('detail', '')}")


def main():
    if len(sys.argv) == 3 and sys.argv[1] == "--file":
        with open(sys.argv[2]) as f:
            quotes = json.load(f)
    elif len(sys.argv) in (3, 4):
        quote = {"symbol": sys.argv[1], "price": float(sys.argv[2])}
        if len(sys.argv) == 4:
            quote["refreshedAt"] = sys.argv[3]
        quotes = [quote]
    else:
        print(__doc__)
        sys.exit(2)

    failed = 0
    for q in quotes:
        try:
            put_quote(q)
            print(f"✓ {q['symbol']} = {q['price']}")
        except (requests.RequestException, RuntimeError) as e:
            print(f"✗ {q.get('symbol', '?')}: {e}")
            failed += 1

    sys.exit(1 if failed else 0)


if __name__ == "__main__":
    main()
