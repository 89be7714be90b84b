# patternrec/plots.py
from __future__ import annotations
from typing import Mapping, Sequence
import numpy as np
import matplotlib.pyplot as plt

from .pattern import Centroid, Pattern


def plot_clusters(
    clusters: Mapping[Centroid, Sequence[Pattern]],
    title: str = "KMeans clusters",
    x_label: str = "X",
    y_label: str = "Y",
) -> plt.Figure:
    """
    Scatter of the first two features, one series per cluster, with the
    centroid marked.
    """
    if not clusters:
        raise ValueError("Empty cluster map.")

    fig, ax = plt.subplots(figsize=(7, 6))
    for centroid in sorted(clusters):
        X = np.stack([p.vector for p in clusters[centroid]], axis=0)
        if X.shape[1] < 2 or centroid.vector.shape[0] < 2:
            plt.close(fig)
            raise ValueError("Need at least 2 features to plot clusters.")
        pts = ax.scatter(X[:, 0], X[:, 1], s=18, alpha=0.8, label=f"{centroid.id + 1}")
        ax.scatter(
            [centroid.vector[0]], [centroid.vector[1]],
            marker="X", s=120, edgecolors="black", color=pts.get_facecolor()[0],
        )

    ax.set_title(title)
    ax.set_xlabel(x_label)
    ax.set_ylabel(y_label)
    ax.legend(title="cluster")
    fig.tight_layout()
    return fig


def plot_confusion_matrix(matrix: np.ndarray, classes: Sequence[str], title: str = "Confusion matrix") -> plt.Figure:
    m = np.asarray(matrix)
    if m.ndim != 2 or m.shape[0] != m.shape[1] or m.shape[0] != len(classes):
        raise ValueError("matrix must be square with one row per class.")

    fig, ax = plt.subplots(figsize=(6, 5))
    im = ax.imshow(m, cmap="Blues")
    fig.colorbar(im, ax=ax)

    ticks = np.arange(len(classes))
    ax.set_xticks(ticks)
    ax.set_yticks(ticks)
    ax.set_xticklabels(classes, rotation=30, ha="right")
    ax.set_yticklabels(classes)

    # annotate counts; dark cells get white text
    threshold = m.max() / 2.0 if m.size else 0.0
    for i in range(m.shape[0]):
        for j in range(m.shape[1]):
            ax.text(j, i, str(int(m[i, j])), ha="center", va="center",
                    color="white" if m[i, j] > threshold else "black")

    ax.set_xlabel("classified")
    ax.set_ylabel("expected")
    ax.set_title(title)
    fig.tight_layout()
    return fig
