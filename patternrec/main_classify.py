# patternrec/main_classify.py
from __future__ import annotations
import os
import argparse
from datetime import datetime
from typing import Any, Dict, List, Optional

from .config import ClassifyConfig, FilterConfig
from .classifier import CLASSIFIERS, make_classifier
from .confusion import ConfusionMatrix
from .io import ensure_dir, load_patterns_csv, save_json, save_rows_csv, write_summary_text
from .pattern import TestPattern
from .plots import plot_confusion_matrix


def build_parser() -> argparse.ArgumentParser:
    d = ClassifyConfig()
    parser = argparse.ArgumentParser(description="Train a classifier on a CSV of patterns and evaluate it.")
    parser.add_argument("--data", type=str, default=d.data_path, help="Training CSV (features..., label)")
    parser.add_argument("--test", type=str, default=d.test_path, help="Optional evaluation CSV (defaults to the training set)")
    parser.add_argument("--method", type=str, choices=CLASSIFIERS, default=d.method)
    parser.add_argument("--k", type=int, default=d.k, help="Neighbours needed by knn")
    parser.add_argument("--seed", type=int, default=d.seed, help="Seed for random filters")
    parser.add_argument("--outdir", type=str, default=None, help="Optional output directory")
    add_filter_args(parser, d.filters)
    return parser


def add_filter_args(parser: argparse.ArgumentParser, defaults: FilterConfig) -> None:
    g = parser.add_argument_group("feature filters")
    g.add_argument("--first-n", type=int, default=defaults.first_n)
    g.add_argument("--first-x", type=float, default=defaults.first_x)
    g.add_argument("--last-n", type=int, default=defaults.last_n)
    g.add_argument("--last-x", type=float, default=defaults.last_x)
    g.add_argument("--random-n", type=int, default=defaults.random_n)
    g.add_argument("--random-x", type=float, default=defaults.random_x)


def filters_from_args(args: argparse.Namespace) -> FilterConfig:
    return FilterConfig(
        first_n=args.first_n,
        first_x=args.first_x,
        last_n=args.last_n,
        last_x=args.last_x,
        random_n=args.random_n,
        random_x=args.random_x,
    )


def run(cfg: ClassifyConfig, outdir: Optional[str] = None) -> Dict[str, Any]:
    train_patterns = load_patterns_csv(cfg.data_path)
    eval_patterns = load_patterns_csv(cfg.test_path) if cfg.test_path else train_patterns

    # one filter instance for both sets so random draws line up
    flt = cfg.filters.build(cfg.seed)
    if flt is not None:
        combined = flt.filter_copy_all(list(train_patterns) + list(eval_patterns))
        train_patterns = combined[: len(train_patterns)]
        eval_patterns = combined[len(train_patterns):]

    clf = make_classifier(cfg.method, cfg.k)
    clf.train(train_patterns)

    tests: List[TestPattern] = [TestPattern.from_pattern(p) for p in eval_patterns]
    rows: List[Dict[str, Any]] = []
    for i, t in enumerate(tests):
        res = clf.classify(t)
        best = next(iter(res.compatibilities.values()), None)
        rows.append({
            "index": i,
            "expected": t.expected_label,
            "classified": "" if t.label is None else t.label,
            "success": t.is_success(),
            "top_compatibility": "" if best is None else round(best, 4),
        })

    cm = ConfusionMatrix(tests)
    cm.compute()
    successes = sum(1 for t in tests if t.is_success())

    summary = {
        "config": cfg.to_dict(),
        "train_patterns": len(train_patterns),
        "classified_patterns": len(tests),
        "successes": successes,
        "accuracy": cm.accuracy(),
        "unclassified": cm.unclassified,
        "classes": cm.classes,
        "confusion_matrix": cm.matrix.tolist(),
    }

    if outdir is not None:
        ensure_dir(outdir)
        save_json(summary, os.path.join(outdir, "results.json"))
        if rows:
            save_rows_csv(rows, os.path.join(outdir, "predictions.csv"))
        write_summary_text(os.path.join(outdir, "summary.txt"), {
            "Classification": format_report(summary),
            "Confusion matrix": cm.display(),
        })
        ensure_dir(os.path.join(outdir, "plots"))
        fig = plot_confusion_matrix(cm.matrix, cm.classes, title=f"{cfg.method}: confusion matrix")
        fig.savefig(os.path.join(outdir, "plots", "confusion_matrix.png"), dpi=200, bbox_inches="tight")

    summary["display_matrix"] = cm.display()
    return summary


def format_report(summary: Dict[str, Any]) -> str:
    n = summary["classified_patterns"]
    pct = (summary["successes"] / n * 100.0) if n else 0.0
    lines = [
        f"Train patterns: {summary['train_patterns']:,d}",
        f"Classified patterns: {n:,d}",
        f"Patterns classified successfully: {summary['successes']:,d} ({pct:.3f}%)",
    ]
    if summary["unclassified"]:
        lines.append(f"Patterns left unclassified: {summary['unclassified']:,d}")
    return "\n".join(lines)


def main():
    args = build_parser().parse_args()
    cfg = ClassifyConfig(
        data_path=args.data,
        test_path=args.test,
        method=args.method,
        k=args.k,
        seed=args.seed,
        filters=filters_from_args(args),
    )

    stamp = datetime.now().strftime("%Y%m%d_%H%M%S")
    outdir = args.outdir or os.path.join("results_classify", stamp)

    summary = run(cfg, outdir)

    print(format_report(summary))
    print(f"\nConfusion matrix ({', '.join(summary['classes'])}):")
    print(summary["display_matrix"])
    print(f"Saved to: {outdir}")
    print("  results.json, summary.txt, predictions.csv")
    print("  plots/confusion_matrix.png")


if __name__ == "__main__":
    main()
