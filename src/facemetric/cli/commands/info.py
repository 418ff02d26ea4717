"""Info command for facemetric CLI.

Lists the metric registry and the active configuration.
"""

from facemetric.cli.utils import BOLD, DIM, ITALIC, RESET
from facemetric.config import load_config
from facemetric.measurement import METRICS


def run_info(args):
    """Show version, metrics and configuration."""
    print(f"{BOLD}facemetric - System Information{RESET}")
    print("=" * 60)
    _print_version_info()
    _print_metrics(getattr(args, "details", False))
    _print_config(load_config(getattr(args, "config", None)))


def _print_version_info():
    from importlib.metadata import PackageNotFoundError, version
    try:
        print(f"  facemetric: {version('facemetric')}")
    except PackageNotFoundError:
        print("  facemetric: (version not available)")


def _print_metrics(details):
    print(f"\n{BOLD}[Metrics]{RESET}")
    for metric in METRICS.values():
        unit = metric.unit or ""
        tag = f" {ITALIC}(estimate){RESET}" if metric.proxy else ""
        print(
            f"  {metric.id.value:<22} {metric.min_value:g}..{metric.max_value:g}{unit}"
            f"  {DIM}typical {metric.typical_min:g}-{metric.typical_max:g}{unit}{RESET}{tag}"
        )
        if details:
            print(f"  {DIM}{'':<22} {metric.description}{RESET}")
            print(f"  {DIM}{'':<22} factors: {', '.join(metric.factors)}{RESET}")


def _print_config(config):
    print(f"\n{BOLD}[Config]{RESET}")
    for section, values in config.to_dict().items():
        items = ", ".join(f"{k}={v}" for k, v in values.items())
        print(f"  {section:<12} {DIM}{items}{RESET}")
