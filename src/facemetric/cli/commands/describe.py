"""Describe command for facemetric CLI."""

from facemetric.cli.utils import DIM, RESET
from facemetric.language import neutral_description
from facemetric.measurement import METRICS, get_metric


def run_describe(args):
    """Print the neutral description of a metric value.

    The value is described as given; values outside the metric's range
    get a note rather than being clamped.
    """
    metric = get_metric(args.metric)
    if metric is None:
        known = ", ".join(m.value for m in METRICS)
        print(f"Unknown metric '{args.metric}'. Known metrics: {known}")
        return 1

    print(neutral_description(
        metric.name,
        args.value,
        metric.unit,
        metric.typical_min,
        metric.typical_max,
    ))
    if metric.clamp(args.value) != args.value:
        print(
            f"{DIM}Note: {args.value:g}{metric.unit} is outside the measurable range "
            f"of {metric.name} ({metric.min_value:g} to {metric.max_value:g}{metric.unit}).{RESET}"
        )
    return 0
