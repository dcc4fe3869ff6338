"""Remove expired members of completed projects.

Meant to be triggered daily by an external scheduler (cron, systemd timer).
Safe to re-run: a second invocation finds nothing left to prune.
"""

from __future__ import annotations

import sys
from pathlib import Path

REPO_ROOT = Path(__file__).resolve().parents[1]
for p in (REPO_ROOT, REPO_ROOT / "src" / "attendance_engine"):
    if str(p) not in sys.path:
        sys.path.insert(0, str(p))

from attendance_engine.main import create_engine


def main() -> None:
    engine = create_engine()
    result = engine.allocation_service.prune_expired_memberships()
    print(f"OK: removed={result.removed_members} zeroed_managers={result.zeroed_managers}")


if __name__ == "__main__":
    main()
