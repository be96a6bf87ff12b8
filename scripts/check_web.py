#!/usr/bin/env python3
"""Boot the ICM API under uvicorn and probe it with a real calculation."""

from __future__ import annotations

import contextlib
import json
import os
import socket
import subprocess
import sys
import time
import urllib.request
from pathlib import Path

SRC_DIR = Path(__file__).resolve().parents[1] / "src"

SAMPLE_REQUEST = {
    "players": [{"id": "p1", "chips": 5000}, {"id": "p2", "chips": 3000}, {"id": "p3", "chips": 2000}],
    "payouts": {"places": [50, 30, 20], "isPercentage": True, "totalPrizePool": 1000},
}


def free_port() -> int:
    with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as s:
        s.bind(("127.0.0.1", 0))
        return s.getsockname()[1]


def stop_and_collect(proc: subprocess.Popen[str], timeout: float = 2.0) -> str:
    """Stop ``proc`` and return whatever it wrote; never waits on a live pipe."""

    proc.terminate()
    try:
        output, _ = proc.communicate(timeout=timeout)
    except subprocess.TimeoutExpired:
        proc.kill()
        output, _ = proc.communicate()
    return output or ""


def _post(url: str, payload: dict) -> dict:
    request = urllib.request.Request(
        url,
        data=json.dumps(payload).encode("utf-8"),
        headers={"Content-Type": "application/json"},
        method="POST",
    )
    with urllib.request.urlopen(request, timeout=2) as resp:
        return json.loads(resp.read().decode("utf-8"))


def main() -> int:
    port = int(os.environ.get("PORT", str(free_port())))
    env = dict(os.environ)
    env["PYTHONPATH"] = os.pathsep.join(filter(None, [str(SRC_DIR), env.get("PYTHONPATH")]))

    proc = subprocess.Popen(
        [sys.executable, "-m", "uvicorn", "gtoicm.web.app:app", "--host", "127.0.0.1", "--port", str(port)],
        stdout=subprocess.PIPE,
        stderr=subprocess.STDOUT,
        text=True,
        env=env,
    )

    base = f"http://127.0.0.1:{port}"
    try:
        for _ in range(100):
            if proc.poll() is not None:
                break
            time.sleep(0.1)
            try:
                with urllib.request.urlopen(f"{base}/healthz", timeout=1) as resp:
                    if resp.status != 200:
                        continue
            except OSError:
                continue
            body = _post(f"{base}/api/v1/icm/calculate", SAMPLE_REQUEST)
            total = sum(player["equity"] for player in body["players"])
            if abs(total - 1000.0) > 1e-6:
                print(f"equities sum to {total}, expected 1000", file=sys.stderr)
                return 1
            print(json.dumps(body, indent=2))
            return 0
        output = stop_and_collect(proc)
        if output:
            sys.stderr.write(output[-2000:])
        return 2
    finally:
        proc.terminate()
        with contextlib.suppress(Exception):
            proc.wait(timeout=2)
        if proc.poll() is None:
            proc.kill()
            with contextlib.suppress(Exception):
                proc.wait(timeout=2)


if __name__ == "__main__":
    raise SystemExit(main())
