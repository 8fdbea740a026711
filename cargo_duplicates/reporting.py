"""
Reporting and export utilities.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Dict, List

import pandas as pd

from .models import AnalysisResult


logger = logging.getLogger(__name__)

_ANSI = {
    "reset": "\033[0m",
    "bold": "\033[1m",
    "red": "\033[31m",
    "green": "\033[32m",
    "yellow": "\033[33m",
    "cyan": "\033[36m",
}

CSV_COLUMNS = [
    "package",
    "version",
    "latest",
    "latest_source",
    "user",
    "user_version",
    "chain",
    "cycle",
]


def _style(text: str, color: bool, *styles: str) -> str:
    if not color or not styles:
        return text
    prefix = "".join(_ANSI[style] for style in styles)
    return f"{prefix}{text}{_ANSI['reset']}"


def format_text(result: AnalysisResult, color: bool = False) -> str:
    """Render the result as line-oriented text."""
    lines: List[str] = []

    for item in result.unresolved:
        lines.append(_style(f"ERROR: {item.dependency.name} not found", color, "red"))

    for occurrence in result.duplicates:
        header = "{} ({}) {} packages".format(
            _style(occurrence.package, color, "bold"),
            _style(occurrence.version, color, "yellow"),
            len(occurrence.users),
        )
        latest = f"latest {occurrence.latest}"
        if occurrence.latest_source == "local":
            latest += " in lock file"
        lines.append(f"{header} [{_style(latest, color, 'green')}]")
        for user in occurrence.users:
            chain = str(user.chain)
            if user.chain.cycle:
                chain = chain.replace("(cycle)", _style("(cycle)", color, "red"))
            lines.append(f"  - {chain}")

    for error in result.errors:
        lines.append(_style(f"WARNING: {error.package}: {error.message}", color, "yellow"))

    if not result.duplicates:
        lines.append(_style("No duplicate packages found", color, "green"))

    return "\n".join(lines) + "\n"


def format_json(result: AnalysisResult, indent: int = 2) -> str:
    """Render the result as JSON."""
    return json.dumps(result.to_dict(), indent=indent)


def result_rows(result: AnalysisResult) -> List[Dict]:
    """Flatten duplicates into one row per dependent."""
    rows = []
    for occurrence in result.duplicates:
        base = {
            "package": occurrence.package,
            "version": occurrence.version,
            "latest": occurrence.latest,
            "latest_source": occurrence.latest_source,
        }
        if not occurrence.users:
            rows.append({**base, "user": None, "user_version": None, "chain": "", "cycle": False})
        for user in occurrence.users:
            rows.append({
                **base,
                "user": user.record.name,
                "user_version": user.record.version,
                "chain": str(user.chain),
                "cycle": user.chain.cycle,
            })
    return rows


def print_summary(result: AnalysisResult) -> None:
    logger.info("=" * 60)
    logger.info("DUPLICATE ANALYSIS")
    logger.info("=" * 60)
    logger.info("Packages in lock file: %s", result.num_packages)
    logger.info("Duplicated packages: %s", len(result.duplicated_packages))
    logger.info("Stale versions: %s", len(result.duplicates))
    logger.info("Unresolved dependency edges: %s", len(result.unresolved))
    if result.fallbacks:
        logger.info("Registry lookups that fell back: %s", ", ".join(result.fallbacks))
    logger.info("=" * 60)


def save_results_json(result: AnalysisResult, output_dir: Path, stem: str) -> Path:
    output_dir.mkdir(parents=True, exist_ok=True)
    results_file = output_dir / f"{stem}_duplicates.json"
    with open(results_file, 'w') as f:
        json.dump(result.to_dict(), f, indent=2)
    return results_file


def export_duplicates_csv(result: AnalysisResult, output_dir: Path, stem: str) -> Path | None:
    rows = result_rows(result)
    if not rows:
        return None
    output_dir.mkdir(parents=True, exist_ok=True)
    csv_file = output_dir / f"{stem}_duplicates.csv"
    df = pd.DataFrame(rows, columns=CSV_COLUMNS)
    df.to_csv(csv_file, index=False)
    return csv_file
