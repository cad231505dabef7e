"""Backup stored collections.

Note: Works for every STORAGE_BACKEND by reading through the facade; the
output is one JSON file holding the raw documents per storage key.
"""

from __future__ import annotations

import asyncio
import importlib
import json
import sys
from datetime import datetime
from pathlib import Path

REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from config import get_settings_module

from src.zen_payroll.zen_payroll.container import build_backend
from src.zen_payroll.zen_payroll.storage.facade import PersistenceFacade


def main() -> None:
    settings = importlib.import_module(get_settings_module())
    facade = PersistenceFacade(build_backend(settings), latency_scale=0)

    out_dir = REPO_ROOT / "backups"
    out_dir.mkdir(parents=True, exist_ok=True)

    ts = datetime.now().strftime("%Y%m%d_%H%M%S")
    out_file = out_dir / f"zen_payroll_{ts}.json"

    snapshot = asyncio.run(facade.snapshot())
    out_file.write_text(json.dumps(snapshot, ensure_ascii=False, indent=2), encoding="utf-8")
    print(f"OK: Backup created: {out_file}")


if __name__ == "__main__":
    main()
