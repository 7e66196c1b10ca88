"""
Quick local smoke test: run the heuristic engine on a few sample URLs and
compare each status with the expected one. Prints one JSON line per URL.

Exits 0 when every status matches, 1 otherwise.

Run: PYTHONPATH=. python3 tools/run_local_smoke.py
"""
import json
import sys

from veriweb.app.scanner import analyze

SAMPLES = [
    ("https://example.com", "SAFE"),
    ("https://wikipedia.org", "SAFE"),
    ("example.com", "SAFE"),
    ("", "SUSPICIOUS"),
    ("http://phishingsite.biz/login", "SUSPICIOUS"),
    ("http://192.168.1.5/login", "MALICIOUS"),
    ("http://secure--update.example.com/verify@login", "MALICIOUS"),
]


def main():
    mismatches = 0
    for url, expected in SAMPLES:
        result = analyze(url)
        ok = result.status.value == expected
        if not ok:
            mismatches += 1
        print(json.dumps({"url": url, "expected": expected, "ok": ok, **result.to_dict()}))

    if mismatches:
        print(f"MISMATCH: {mismatches} of {len(SAMPLES)} samples differ")
        return 1
    print(f"OK: {len(SAMPLES)} samples")
    return 0


if __name__ == '__main__':
    sys.exit(main())
