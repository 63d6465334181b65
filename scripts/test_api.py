# =============================================================================
# scripts/test_api.py — Quick API smoke test (run with backend on 127.0.0.1:8000)
# =============================================================================
# Usage: python scripts/test_api.py
# =============================================================================

import os
import sys

import requests

BASE = os.environ.get("BASE_URL", "http://127.0.0.1:8000")
TIMEOUT = 5


def get(path: str) -> dict | list | None:
    try:
        r = requests.get(f"{BASE}{path}", timeout=TIMEOUT)
        r.raise_for_status()
        return r.json()
    except requests.RequestException as e:
        print(f"GET {path} failed: {e}")
        return None


def post(path: str, json: dict) -> tuple[dict | list | None, int | None]:
    try:
        r = requests.post(f"{BASE}{path}", json=json, timeout=60)
        r.raise_for_status()
        return r.json(), r.status_code
    except requests.HTTPError as e:
        code = e.response.status_code if e.response is not None else None
        print(f"POST {path} failed: {e} (status={code})")
        if e.response is not None:
            print("Response:", e.response.text[:500])
        return None, code
    except requests.RequestException as e:
        print(f"POST {path} failed: {e}")
        return None, None


def main() -> int:
    print("1. GET /health ...")
    h = get("/health")
    if not h:
        print("   Backend not reachable. Start with: uvicorn careergenie.main:app --host 127.0.0.1 --port 8000")
        return 1
    print("   OK:", h.get("status"), "| providers:", h.get("ai", {}).get("providers"))

    print("2. GET /api/ai/status ...")
    s = get("/api/ai/status")
    if s is None:
        return 1
    print("   OK: chain =", s.get("chain"), "| details =", s.get("details"))

    print("3. GET /api/interview/roles ...")
    r = get("/api/interview/roles")
    if r is None:
        return 1
    print("   OK:", len(r.get("roles", [])), "roles")

    print("4. POST /generate ...")
    out, status = post("/generate", {"prompt": "Name three skills a backend developer needs."})
    if out:
        print("   OK: provider =", out.get("provider"), "| model =", out.get("model"), "| latency_ms =", out.get("latency_ms"))
        print("   text (first 200 chars):", (out.get("text") or "")[:200])
    elif status == 503:
        print("   OK: 503 when every provider failed (check GEMINI_API_KEY / GROQ_API_KEY).")
    else:
        return 1

    print("5. POST /api/interview/questions ...")
    q, _ = post("/api/interview/questions", {"role": "Backend Developer", "count": 3})
    if q is None:
        return 1
    print("   OK: source =", q.get("source"), "| provider =", q.get("provider"), "| count =", q.get("count"))

    print("All checks passed.")
    return 0


if __name__ == "__main__":
    sys.exit(main())
