#!/usr/bin/env python3
"""
check_curriculum.py - Validate a curriculum file and report its structure.

Loads the YAML curriculum, rejects prerequisite cycles, warns about group
IDs that prefix each other, and prints the unlock order with item totals.

Usage:
  python scripts/check_curriculum.py
  python scripts/check_curriculum.py --curriculum path/to/curriculum.yaml --report report.md
"""

import argparse
import logging
import sys
from pathlib import Path

# Project root for imports
PROJECT_ROOT = Path(__file__).parent.parent
sys.path.insert(0, str(PROJECT_ROOT))

from orbitlearn.classroom.errors import CurriculumError
from orbitlearn.classroom.graph import find_prefix_collisions, topological_order
from orbitlearn.config import configure_logging
from orbitlearn.schemas import Curriculum
from orbitlearn.utils import DEFAULT_CURRICULUM_PATH, load_curriculum

logger = logging.getLogger(__name__)


def build_report(curriculum: Curriculum) -> str:
    """Markdown summary of groups in dependency order."""
    lines = [
        "# Curriculum Report",
        "",
        f"- Start group: {curriculum.start_group}",
        f"- Item matching: {curriculum.item_matching}",
        f"- Groups: {len(curriculum.groups)}",
        f"- Items: {curriculum.total_item_count}",
        "",
        "## Dependency Order",
        "",
        "| # | Group | Prerequisites | Items | Sections | Exercises | Quiz |",
        "|---|-------|---------------|-------|----------|-----------|------|",
    ]
    for idx, group_id in enumerate(topological_order(curriculum), 1):
        group = curriculum.get(group_id)
        prereqs = ", ".join(group.prerequisites) or "-"
        lines.append(
            f"| {idx} | {group.display_title} ({group.id}) | {prereqs} | "
            f"{group.item_count} | {len(group.sections)} | {group.exercises} | "
            f"{group.quiz.questions} |"
        )

    collisions = find_prefix_collisions(curriculum)
    if collisions:
        lines += ["", "## Prefix Collisions", ""]
        lines += [f"- `{short}` is a prefix of `{long}`" for short, long in collisions]

    return "\n".join(lines) + "\n"


# -----------------------------------------------------------------------------
# Main
# -----------------------------------------------------------------------------

def main():
    parser = argparse.ArgumentParser(
        description="Validate a curriculum file and report its structure.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python scripts/check_curriculum.py
  python scripts/check_curriculum.py --curriculum my_course.yaml --report report.md
        """,
    )
    parser.add_argument(
        "--curriculum",
        type=Path,
        default=DEFAULT_CURRICULUM_PATH,
        help="Curriculum YAML file (default: bundled curriculum.yaml)",
    )
    parser.add_argument(
        "--report",
        type=Path,
        default=None,
        help="Write the markdown report to this file instead of stdout",
    )
    parser.add_argument(
        "--log-level",
        default="INFO",
        help="Logging level (default: INFO)",
    )

    args = parser.parse_args()
    configure_logging(args.log_level)

    try:
        curriculum = load_curriculum(args.curriculum)
    except FileNotFoundError as e:
        print(f"ERROR: {e}")
        sys.exit(1)
    except CurriculumError as e:
        logger.error(f"Invalid curriculum {args.curriculum}: {e}")
        sys.exit(1)

    logger.info(f"Loaded {len(curriculum.groups)} groups from {args.curriculum}")
    report = build_report(curriculum)

    if args.report:
        args.report.parent.mkdir(parents=True, exist_ok=True)
        args.report.write_text(report, encoding="utf-8")
        print(f"\nReport written to {args.report}")
    else:
        print(report)


if __name__ == "__main__":
    main()
