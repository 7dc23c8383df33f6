from __future__ import annotations

import sys
from pathlib import Path
from typing import List, Optional

from cycle_hire.pipeline import main as pipeline_main

REPO = Path(__file__).resolve().parents[1]


def main(argv: Optional[List[str]] = None) -> int:
    """Run the workflow with the repository's pipeline.yaml unless --config is given."""
    argv = list(sys.argv[1:] if argv is None else argv)
    if "--config" not in argv:
        argv += ["--config", str(REPO / "pipeline.yaml")]
    return pipeline_main(argv)


if __name__ == "__main__":
    raise SystemExit(main())
