from __future__ import annotations

import asyncio
import importlib
import sys
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

    written = asyncio.run(facade.ensure_seeded())
    if written:
        print("OK: Seeded " + ", ".join(written))
    else:
        print("OK: Every collection already has data; nothing seeded")


if __name__ == "__main__":
    main()
