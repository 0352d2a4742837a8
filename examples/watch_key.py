#!/usr/bin/env python
"""Watch a key on a running raccoon-kv store and print every change.

Reads the store address from RACCOON_KV_URL (default http://localhost:8080).

    python examples/watch_key.py my-key
"""

import os
import sys
import time

from raccoon_kv import ClientConfig, KVClient, configure_logging


def main():
    if len(sys.argv) != 2:
        print(f"usage: {sys.argv[0]} KEY")
        sys.exit(2)
    key = sys.argv[1]

    configure_logging("INFO")
    os.environ.setdefault("RACCOON_KV_URL", "http://localhost:8080")
    config = ClientConfig.from_env()

    print(f"Watching {key!r} on {config.base_url}")
    print("Press Ctrl+C to stop...")

    def show(payload: bytes):
        if payload:
            print(f"  {key} = {payload!r}")
        else:
            print(f"  {key} is absent")

    with KVClient(config) as kv:
        watcher = kv.watch_in_thread(key, show)
        try:
            while watcher.running:
                time.sleep(1)
        except KeyboardInterrupt:
            print("\nStopping watch...")
        watcher.stop(timeout=config.watch_request_timeout)

    if watcher.error is not None:
        print(f"Watch failed: {watcher.error!r}")
        sys.exit(1)


if __name__ == "__main__":
    main()
