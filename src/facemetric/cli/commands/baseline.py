"""Baseline command for facemetric CLI.

Folds a JSON history of measurement maps into a baseline, and optionally
compares a current capture against it.
"""

import json

from facemetric.baseline import compare_to_baseline, compute_baseline, history_readiness
from facemetric.cli.utils import BOLD, DIM, RESET, load_history, load_measurement_map
from facemetric.config import load_config
from facemetric.measurement import get_metric


def run_baseline(args):
    """Compute and print the baseline (and trends with --current)."""
    config = load_config(getattr(args, "config", None))
    history = load_history(args.history)
    baseline = compute_baseline(history, config.trend)
    readiness = history_readiness(history)

    changes = {}
    if args.current:
        current = load_measurement_map(args.current)
        changes = compare_to_baseline(current, baseline, config.trend)

    if args.json:
        payload = {"baseline": baseline.to_dict(), "readiness": readiness.to_dict()}
        if args.current:
            payload["changes"] = {k: v.to_dict() for k, v in changes.items()}
        print(json.dumps(payload, indent=2, ensure_ascii=False))
        return 0

    if baseline.is_empty:
        print(f"No measurements found in {args.history}")
        return 1

    print(f"{BOLD}Baseline{RESET} {DIM}({baseline.sample_count} captures){RESET}")
    print("=" * 60)
    for metric_id, m in baseline.metrics.items():
        metric = get_metric(metric_id)
        name = metric.name if metric else metric_id
        unit = metric.unit if metric else ""
        line = f"  {name:<24} {m.display_value}{unit:<2} {DIM}conf {m.confidence_percent}{RESET}"
        change = changes.get(metric_id)
        if change is not None:
            marker = " *" if change.significant else ""
            line += f"  {change.trend.icon} {change.trend.label} ({change.change:+.1f}){marker}"
        print(line)

    if changes:
        print(f"\n{DIM}* change exceeds 1.5x measurement uncertainty{RESET}")

    if readiness.is_ready:
        print("\nProgress tracking: ready")
    else:
        print(
            f"\nProgress tracking: {readiness.progress:.0%} "
            f"({readiness.days_remaining} more days, {readiness.samples_needed} more captures)"
        )
    return 0
