#!/usr/bin/env python3
"""
End-to-end demo for the Dispute Analyzer.

Prerequisites:
    1. API, worker, Postgres, MinIO and Temporal running
    2. OPENAI_API_KEY set in .env

Usage:
    python scripts/e2e_demo.py --file complaint.pdf --party "Acme Corp" \
        --file answer.txt --party "Beta LLC"

    # Output raw JSON:
    python scripts/e2e_demo.py -f a.txt -p A -f b.txt -p B --json
"""

import argparse
import json
import mimetypes
import sys
import time
from pathlib import Path

import httpx

API_BASE = "http://localhost:8000"
POLL_INTERVAL = 3  # seconds
MAX_WAIT = 300  # seconds


def check_health(client: httpx.Client) -> bool:
    try:
        return client.get(f"{API_BASE}/health").status_code == 200
    except httpx.RequestError:
        return False


def check_readiness(client: httpx.Client) -> dict:
    try:
        return client.get(f"{API_BASE}/health/ready").json()
    except httpx.RequestError as e:
        return {"error": str(e)}


def upload_case(client: httpx.Client, paths: list[Path], parties: list[str]) -> dict:
    """Upload all documents as one case."""
    handles = [open(path, "rb") for path in paths]
    try:
        files = [
            ("documents", (path.name, handle, mimetypes.guess_type(path.name)[0] or "text/plain"))
            for path, handle in zip(paths, handles)
        ]
        resp = client.post(f"{API_BASE}/api/cases", files=files, data={"parties": parties})
        resp.raise_for_status()
        return resp.json()
    finally:
        for handle in handles:
            handle.close()


def start_analysis(client: httpx.Client, case_id: str) -> dict:
    resp = client.post(f"{API_BASE}/api/cases/{case_id}/analyze")
    resp.raise_for_status()
    return resp.json()


def get_case(client: httpx.Client, case_id: str) -> dict:
    resp = client.get(f"{API_BASE}/api/cases/{case_id}")
    resp.raise_for_status()
    return resp.json()


def poll_until_complete(client: httpx.Client, case_id: str, max_wait: int = MAX_WAIT) -> dict:
    start = time.time()
    while time.time() - start < max_wait:
        case = get_case(client, case_id)
        if case["status"] in ("completed", "failed"):
            return case

        elapsed = int(time.time() - start)
        print(f"  Status: {case['status']} ({elapsed}s elapsed)", end="\r")
        time.sleep(POLL_INTERVAL)

    return {"status": "timeout", "errorMessage": f"Exceeded {max_wait}s wait time"}


def print_case(case: dict) -> None:
    print("\n" + "=" * 60)
    print("DOCUMENTS")
    print("=" * 60)
    for doc in case.get("documents", []):
        analysis = doc.get("analysis") or {}
        print(f"\n{doc['filename']} (party: {doc['party']})")
        print(f"  Type: {analysis.get('documentType', 'N/A')}")
        print(f"  Parties: {', '.join(analysis.get('parties', [])) or 'N/A'}")
        print(f"  Claims: {len(analysis.get('claims', []))}, evidence: {len(analysis.get('evidence', []))}")

    verdict = (case.get("verdict") or {}).get("result") or {}
    print("\n" + "=" * 60)
    print("VERDICT")
    print("=" * 60)
    print(f"\n{verdict.get('verdict', 'N/A')}")
    print(f"Confidence: {verdict.get('confidence', 'N/A')}")
    print("\nRecommendations:")
    for item in verdict.get("recommendations", []):
        print(f"  - {item}")
    print("\n" + "=" * 60)


def main():
    parser = argparse.ArgumentParser(description="E2E demo for the Dispute Analyzer")
    parser.add_argument("--file", "-f", type=Path, action="append", required=True, help="Document (.pdf/.txt)")
    parser.add_argument("--party", "-p", action="append", default=[], help="Party label per file")
    parser.add_argument("--json", action="store_true", help="Output raw JSON")
    args = parser.parse_args()

    missing = [path for path in args.file if not path.exists()]
    if missing:
        print(f"Error: file not found: {', '.join(map(str, missing))}")
        sys.exit(1)

    with httpx.Client(timeout=60.0) as client:
        print("\n[1/4] Checking service readiness...")
        if not check_health(client):
            print("  Error: API is not responding.")
            sys.exit(1)
        readiness = check_readiness(client)
        for service, status in readiness.get("checks", {}).items():
            print(f"  {service}: {'OK' if status == 'ok' else status}")
        if readiness.get("status") != "ok":
            print("  Error: Not all services are ready")
            sys.exit(1)

        print(f"\n[2/4] Uploading {len(args.file)} documents...")
        try:
            case = upload_case(client, args.file, args.party)
        except httpx.HTTPStatusError as e:
            print(f"  Error uploading: {e.response.text}")
            sys.exit(1)
        case_id = case["caseId"]
        print(f"  Case ID: {case_id}")

        print("\n[3/4] Starting analysis...")
        try:
            started = start_analysis(client, case_id)
        except httpx.HTTPStatusError as e:
            print(f"  Error starting analysis: {e.response.text}")
            sys.exit(1)
        print(f"  Workflow: {started['workflowId']}")

        print(f"\n[4/4] Waiting for verdict (max {MAX_WAIT}s)...")
        result = poll_until_complete(client, case_id)

    if result["status"] != "completed":
        print(f"\n  Analysis {result['status']}: {result.get('errorMessage') or 'Unknown error'}")
        sys.exit(1)

    if args.json:
        print(json.dumps(result, indent=2))
    else:
        print_case(result)
    sys.exit(0)


if __name__ == "__main__":
    main()
