# =============================================================================
# run.py — Start the CareerGenie backend (FastAPI) and wait until it is healthy
# =============================================================================
# Usage: python run.py
# Backend: http://127.0.0.1:8000 (override with HOST / PORT)
# =============================================================================

import os
import subprocess
import sys
import time
import urllib.error
import urllib.request

BACKEND_HOST = os.environ.get("HOST", "127.0.0.1")
BACKEND_PORT = int(os.environ.get("PORT", "8000"))

# Project root (where run.py lives)
ROOT = os.path.dirname(os.path.abspath(__file__))


def wait_for_backend(url: str, timeout: float = 60.0) -> bool:
    print(f"Waiting for backend at {url}...", end="", flush=True)
    start = time.monotonic()
    while time.monotonic() - start < timeout:
        try:
            with urllib.request.urlopen(f"{url}/health", timeout=2) as response:
                if response.status == 200:
                    print(" Ready!")
                    return True
        except (urllib.error.URLError, OSError):
            print(".", end="", flush=True)
            time.sleep(1)
    print(" Timeout.")
    return False


def main() -> int:
    print("Starting CareerGenie...")
    backend_url = f"http://{BACKEND_HOST}:{BACKEND_PORT}"
    backend_cmd = [
        sys.executable,
        "-m", "uvicorn",
        "careergenie.main:app",
        "--host", BACKEND_HOST,
        "--port", str(BACKEND_PORT),
    ]

    backend_proc = subprocess.Popen(backend_cmd, cwd=ROOT, env=os.environ.copy())
    if not wait_for_backend(backend_url):
        print("Backend failed to start within timeout.")
        backend_proc.terminate()
        return 1

    print(f"API docs: {backend_url}/docs")
    try:
        return backend_proc.wait()
    except KeyboardInterrupt:
        print("\nShutting down...")
        backend_proc.terminate()
        backend_proc.wait(timeout=5)
        return 0


if __name__ == "__main__":
    sys.exit(main())
