# patternrec/io.py
from __future__ import annotations
from typing import List, Dict, Any, Mapping, Sequence
import os
import json
import csv

from .pattern import Centroid, Pattern


def ensure_dir(path: str) -> None:
    os.makedirs(path, exist_ok=True)


def save_json(obj: Dict[str, Any], path: str) -> None:
    with open(path, "w") as f:
        json.dump(obj, f, indent=2)


def save_rows_csv(rows: List[Dict[str, Any]], path: str) -> None:
    if not rows:
        raise ValueError("No rows to save.")

    keys = list(rows[0].keys())
    with open(path, "w", newline="") as f:
        w = csv.DictWriter(f, fieldnames=keys)
        w.writeheader()
        for r in rows:
            w.writerow(r)


def load_patterns_csv(path: str) -> List[Pattern]:
    """
    Rows are `f1,f2,...,fn,label` without a header. Blank rows are skipped.
    """
    patterns: List[Pattern] = []
    with open(path, "r", newline="") as f:
        r = csv.reader(f)
        for row in r:
            if not row or all(not cell.strip() for cell in row):
                continue
            if len(row) < 2:
                raise ValueError(f"{path}:{r.line_num}: expected features followed by a label.")
            try:
                vector = [float(cell) for cell in row[:-1]]
            except ValueError as e:
                raise ValueError(f"{path}:{r.line_num}: {e}") from e
            patterns.append(Pattern(label=row[-1].strip(), vector=vector))
    return patterns


def save_patterns_csv(patterns: Sequence[Pattern], path: str) -> None:
    with open(path, "w", newline="") as f:
        w = csv.writer(f)
        for p in patterns:
            w.writerow([*p.vector.tolist(), "" if p.label is None else p.label])


def save_clusters_csv(clusters: Mapping[Centroid, Sequence[Pattern]], path: str) -> None:
    with open(path, "w", newline="") as f:
        w = csv.writer(f)
        for centroid, members in clusters.items():
            for p in members:
                w.writerow([centroid.id + 1, *p.vector.tolist(), "" if p.label is None else p.label])


def format_clusters(clusters: Mapping[Centroid, Sequence[Pattern]]) -> str:
    lines = []
    for centroid in sorted(clusters):
        members = clusters[centroid]
        coords = ", ".join(f"{v:g}" for v in centroid.vector.tolist())
        lines.append("------------------------------ CLUSTER -----------------------------------")
        lines.append(f"Centroid {centroid.id + 1} {{{coords}}}, {len(members)} patterns")
        lines.extend(repr(p) for p in members)
        lines.append("")
    return "\n".join(lines)


def write_summary_text(path: str, sections: Mapping[str, str]) -> None:
    with open(path, "w") as f:
        for title, body in sections.items():
            f.write(f"=== {title} ===\n")
            f.write(body.rstrip("\n") + "\n\n")
