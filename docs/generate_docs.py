"""
Regenerate the ChillAI documentation.

Usage:
    python docs/generate_docs.py [--output-dir docs] [--reference CONFIG.md] [--skip-api]

Writes the full configuration reference (``CONFIG.md`` at the repository root
by default), one page per configuration section under ``<output-dir>/config/``
and, when pdoc is importable, the API reference under ``<output-dir>/site/``.
"""

from __future__ import annotations

import argparse
import importlib.util
import subprocess
import sys
from pathlib import Path
from typing import List, Optional

from chillai.utils.config_reference import CONFIG_SCHEMA, write_markdown

REPO_ROOT = Path(__file__).resolve().parents[1]


def write_config_pages(output_dir: Path, reference: Path = REPO_ROOT / "CONFIG.md") -> List[Path]:
    pages = [write_markdown(reference)]
    for section in CONFIG_SCHEMA:
        pages.append(write_markdown(output_dir / "config" / f"{section}.md", section=section))
    return pages


def write_api_site(output_dir: Path) -> Optional[Path]:
    if importlib.util.find_spec("pdoc") is None:
        return None
    site = output_dir / "site"
    subprocess.run([sys.executable, "-m", "pdoc", "chillai", "-o", str(site)], check=True)
    return site


def main(argv: Optional[List[str]] = None) -> None:
    parser = argparse.ArgumentParser(description="Regenerate ChillAI docs.")
    parser.add_argument("--output-dir", type=Path, default=REPO_ROOT / "docs")
    parser.add_argument("--reference", type=Path, default=REPO_ROOT / "CONFIG.md", help="Full configuration reference path.")
    parser.add_argument("--skip-api", action="store_true", help="Only write the configuration pages.")
    args = parser.parse_args(argv)

    for page in write_config_pages(args.output_dir, args.reference):
        print(f"wrote {page}")
    if args.skip_api:
        return
    site = write_api_site(args.output_dir)
    print(f"wrote {site}" if site else "pdoc is not installed; API reference skipped.")


if __name__ == "__main__":
    main()
