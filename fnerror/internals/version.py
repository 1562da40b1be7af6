from __future__ import annotations
import datetime
import platform
import sys

from fnerror import __version__ as app_ver, __dev__ as is_dev


def component_versions() -> dict[str, str]:
    """Versions shown by `fnerror --version`."""
    import lark

    return {
        "fnerror": app_ver + (" (dev)" if is_dev else ""),
        "python": platform.python_version(),
        "lark": getattr(lark, "__version__", "unknown"),
    }


def print_banner() -> None:
    if hasattr(sys.stdout, "reconfigure"):
        sys.stdout.reconfigure(encoding="utf-8")
    v = component_versions()

    # Styling only on an interactive terminal
    bold, dim, reset = ("\x1b[1m", "\x1b[2m", "\x1b[0m") if sys.stdout.isatty() else ("", "", "")

    print(f"{bold}fnerror{reset} • {v['fnerror']}")
    print(f"{dim}Python {v['python']} • lark {v['lark']} • {datetime.date.today().isoformat()}{reset}")
