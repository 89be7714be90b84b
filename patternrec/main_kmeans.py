# patternrec/main_kmeans.py
from __future__ import annotations
import os
import argparse
from datetime import datetime
from typing import Any, Dict, Optional

from .config import KMeansConfig
from .io import ensure_dir, format_clusters, load_patterns_csv, save_clusters_csv, save_json, write_summary_text
from .kmeans import Clusters, KMeans
from .main_classify import add_filter_args, filters_from_args
from .plots import plot_clusters


def build_parser() -> argparse.ArgumentParser:
    d = KMeansConfig()
    parser = argparse.ArgumentParser(description="Cluster a CSV of patterns with k-means.")
    parser.add_argument("--data", type=str, default=d.data_path, help="CSV (features..., label)")
    parser.add_argument("--centroids", type=int, default=d.n_centroids, help="Number of clusters k")
    parser.add_argument("--max-iterations", type=int, default=d.max_iterations)
    parser.add_argument("--tolerance", type=float, default=d.tolerance, help="0 = exact convergence")
    parser.add_argument("--seed", type=int, default=d.seed)
    parser.add_argument("--outdir", type=str, default=None, help="Optional output directory")
    add_filter_args(parser, d.filters)
    return parser


def run(cfg: KMeansConfig, outdir: Optional[str] = None) -> Dict[str, Any]:
    patterns = load_patterns_csv(cfg.data_path)
    flt = cfg.filters.build(cfg.seed)
    if flt is not None:
        patterns = flt.filter_copy_all(patterns)

    km = KMeans(max_iterations=cfg.max_iterations, tolerance=cfg.tolerance, seed=cfg.seed)
    km.train(patterns, cfg.n_centroids)
    clusters: Clusters = km.classify(patterns)

    summary = {
        "config": cfg.to_dict(),
        "patterns": len(patterns),
        "iterations": km.n_iterations,
        "clusters": [
            {"id": c.id + 1, "centroid": c.vector.tolist(), "size": len(members)}
            for c, members in clusters.items()
        ],
    }

    if outdir is not None:
        ensure_dir(outdir)
        save_json(summary, os.path.join(outdir, "results.json"))
        save_clusters_csv(clusters, os.path.join(outdir, "clusters.csv"))
        write_summary_text(os.path.join(outdir, "summary.txt"), {"Clusters": format_clusters(clusters)})
        if patterns and len(patterns[0]) >= 2:
            ensure_dir(os.path.join(outdir, "plots"))
            fig = plot_clusters(clusters)
            fig.savefig(os.path.join(outdir, "plots", "clusters.png"), dpi=200, bbox_inches="tight")

    summary["text"] = format_clusters(clusters)
    return summary


def main():
    args = build_parser().parse_args()
    cfg = KMeansConfig(
        data_path=args.data,
        n_centroids=args.centroids,
        max_iterations=args.max_iterations,
        tolerance=args.tolerance,
        seed=args.seed,
        filters=filters_from_args(args),
    )

    stamp = datetime.now().strftime("%Y%m%d_%H%M%S")
    outdir = args.outdir or os.path.join("results_kmeans", stamp)

    summary = run(cfg, outdir)

    print(summary["text"])
    print(f"Converged after {summary['iterations']} iterations ({summary['patterns']} patterns).")
    print(f"\nSaved to: {outdir}")
    print("  results.json, summary.txt, clusters.csv")
    print("  plots/clusters.png")


if __name__ == "__main__":
    main()
