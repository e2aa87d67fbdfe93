"""Run the PartStore API under uvicorn.

Usage:
    python src/server.py                        # 0.0.0.0:8000
    python src/server.py --port 9000 --reload
"""

import argparse

import uvicorn


def main():
    parser = argparse.ArgumentParser(description="PartStore API server")
    parser.add_argument("--host", default="0.0.0.0")
    parser.add_argument("--port", type=int, default=8000)
    parser.add_argument("--reload", action="store_true", help="Reload on code changes (development)")
    args = parser.parse_args()

    # A single worker: the real-time connection registry lives in process memory
    uvicorn.run("app:app", host=args.host, port=args.port, reload=args.reload, workers=1)


if __name__ == "__main__":
    main()
