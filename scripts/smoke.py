# scripts/smoke.py
"""
Smoke Test Script for the pitchpdf pipeline.

Usage
-----
1. Render the built-in sample proposal:
    $ uv run python scripts/smoke.py

2. Render a fields JSON file and force a short page:
    $ uv run python scripts/smoke.py --file samples/proposal.json --page-height 700

The HTML is written to ``artifacts/smoke.html`` and one trace JSON per stage
to ``artifacts/trace/`` (or ``PITCHPDF_TRACE_DIR``).
"""

import argparse
import json
import logging
import sys
from pathlib import Path

from dotenv import load_dotenv

from pitchpdf.core.tracing import TraceWriter
from pitchpdf.pipelines.proposal import run_pipeline

# --------------------------------------------------------------------------- #
# Environment Setup
# --------------------------------------------------------------------------- #
env_path = Path(".env")
if env_path.exists():
    load_dotenv(env_path)
    print("Loaded .env file")

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    handlers=[logging.StreamHandler(sys.stdout)],
)

# --------------------------------------------------------------------------- #
# Test Data
# --------------------------------------------------------------------------- #
SAMPLE_FIELDS = {
    "clientName": "Jane Doe",
    "clientCompany": "Acme Corp",
    "projectTitle": "Website Redesign",
    "problemStatement": "The current site is slow, hard to update and converts poorly on mobile.",
    "proposedSolution": "A static-first rebuild with a headless CMS and a design system.",
    "scopeOfWork": "Discovery\nInformation architecture\nDesign system\nFrontend\nCMS migration",
    "timeline": "Weeks 1-2: discovery\nWeeks 3-6: design\nWeeks 7-10: build\nWeek 11: launch",
    "pricing": "$24,000 (fixed fee)",
    "terms": "50% upfront, 50% on launch. Two revision rounds per milestone.",
    "contactInfo": "Sam Lee\nStudio North\nsam@studionorth.example",
}


def main() -> None:
    """Execute the smoke test workflow."""
    parser = argparse.ArgumentParser(description="Run pitchpdf Smoke Test")
    parser.add_argument("--file", "-f", type=str, help="Path to a proposal fields JSON file")
    parser.add_argument("--page-height", type=float, default=None, help="Override page height")
    args = parser.parse_args()

    # 1. Prepare Input Data
    if args.file:
        input_path = Path(args.file)
        if not input_path.exists():
            print(f"File not found: {input_path}")
            return
        print(f"\nUsing fields file: {input_path}")
        fields = json.loads(input_path.read_text(encoding="utf-8"))
    else:
        print("\nUsing built-in sample fields (no --file provided)")
        fields = SAMPLE_FIELDS

    # 2. Execution Phase
    result = run_pipeline(fields, page_height=args.page_height)

    # 3. Inspection Phase
    print("\n" + "=" * 60)
    print("Pipeline Finished")
    print("=" * 60)

    doc = result["document"]
    print(f"\nTitle: {doc.meta.project_title}")
    print(f"Blocks: {doc.meta.block_count}  Words: {doc.meta.word_count}")

    print("\nPages:")
    for page in result["pagination"].pages:
        flag = "  (overflow)" if page.overflow else ""
        types = ", ".join(b.type for b in page.blocks)
        print(f"  {page.number}. {page.used_height:.0f}/{page.height:.0f}px  [{types}]{flag}")

    print("\nTrace Log:")
    for snap in result["trace"].snapshots():
        print(f"  {snap.revision}. {snap.note}")
    paths = TraceWriter().write_all(result["trace"].snapshots())
    print(f"  -> {len(paths)} file(s) in {paths[0].parent}")

    # Output Location
    out = Path("artifacts") / "smoke.html"
    out.parent.mkdir(parents=True, exist_ok=True)
    out.write_text(result["html"], encoding="utf-8")
    print(f"\nHTML saved to: {out}")


if __name__ == "__main__":
    main()
