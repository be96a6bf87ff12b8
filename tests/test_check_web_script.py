from __future__ import annotations

import importlib.util
import subprocess
import sys
import time
from pathlib import Path

SCRIPT = Path(__file__).resolve().parents[1] / "scripts" / "check_web.py"


def _load_script():
    spec = importlib.util.spec_from_file_location("check_web", SCRIPT)
    assert spec is not None and spec.loader is not None
    module = importlib.util.module_from_spec(spec)
    spec.loader.exec_module(module)
    return module


def test_stop_and_collect_returns_for_a_server_that_never_exits() -> None:
    check_web = _load_script()
    proc = subprocess.Popen(
        [sys.executable, "-c", "import time; print('booting', flush=True); time.sleep(60)"],
        stdout=subprocess.PIPE,
        stderr=subprocess.STDOUT,
        text=True,
    )
    assert proc.stdout is not None
    assert proc.stdout.readline().strip() == "booting"

    start = time.monotonic()
    output = check_web.stop_and_collect(proc)

    assert time.monotonic() - start < 10
    assert proc.poll() is not None
    assert output == ""
