"""Run the idle session server with uvicorn."""

from __future__ import annotations

import os
import argparse

import uvicorn


def parse_args() -> argparse.Namespace:
    p = argparse.ArgumentParser(description="Idle session coordination server")
    p.add_argument("--host", default=os.getenv("HOST", "0.0.0.0"))
    p.add_argument("--port", type=int, default=int(os.getenv("PORT", "8000")))
    return p.parse_args()


def main() -> None:
    args = parse_args()
    uvicorn.run("idle_guard.server:app", host=args.host, port=args.port, log_config=None)


if __name__ == "__main__":
    main()
