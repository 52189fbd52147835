"""Version and environment information for pattern-catalog.

Usage:
    from pattern_catalog import __version__, get_version_info, print_version_info

    print(__version__)  # "1.0.0"
    print_version_info()  # for bug reports

CLI Usage:
    python -m pattern_catalog --version
    python -m pattern_catalog info
"""

from __future__ import annotations

import importlib
import importlib.util
import platform
import sys
from importlib import metadata
from typing import Any, Dict, Optional

# Version components
VERSION_MAJOR = 1
VERSION_MINOR = 0
VERSION_PATCH = 0
VERSION_SUFFIX = ""  # e.g., "alpha", "beta", "rc1"

__version__ = f"{VERSION_MAJOR}.{VERSION_MINOR}.{VERSION_PATCH}{'-' + VERSION_SUFFIX if VERSION_SUFFIX else ''}"


def get_version() -> str:
    if VERSION_SUFFIX:
        return f"{VERSION_MAJOR}.{VERSION_MINOR}.{VERSION_PATCH}-{VERSION_SUFFIX}"
    return f"{VERSION_MAJOR}.{VERSION_MINOR}.{VERSION_PATCH}"


def get_python_info() -> Dict[str, str]:
    return {
        "version": platform.python_version(),
        "implementation": platform.python_implementation(),
        "executable": sys.executable,
    }


def get_platform_info() -> Dict[str, str]:
    return {
        "system": platform.system(),
        "release": platform.release(),
        "machine": platform.machine(),
    }


def _get_package_version(
    module_name: str, package_name: Optional[str] = None
) -> Optional[str]:
    """Get an installed package version without failing when it is absent.

    Args:
        module_name: Name of the module to look for.
        package_name: Distribution name (defaults to module_name).

    Returns:
        Version string or None if not installed.
    """
    if importlib.util.find_spec(module_name) is None:
        return None
    try:
        return metadata.version(package_name or module_name)
    except metadata.PackageNotFoundError:
        module = importlib.import_module(module_name)
        return getattr(module, "__version__", None)


def get_dependency_versions() -> Dict[str, Optional[str]]:
    """Versions of the runtime dependencies (None when not installed)."""
    return {
        "pydantic": _get_package_version("pydantic"),
        "pydantic_core": _get_package_version("pydantic_core", "pydantic-core"),
        "typing_extensions": _get_package_version("typing_extensions", "typing-extensions"),
        "cachetools": _get_package_version("cachetools"),
    }


def get_version_info() -> Dict[str, Any]:
    """Get version, interpreter, platform and dependency information.

    Example:
        >>> info = get_version_info()
        >>> info["pattern_catalog"]
        '1.0.0'
    """
    return {
        "pattern_catalog": __version__,
        "python": get_python_info(),
        "platform": get_platform_info(),
        "dependencies": get_dependency_versions(),
    }


def format_version_info(info: Optional[Dict[str, Any]] = None) -> str:
    """Format version info as a human-readable string with aligned colons."""
    if info is None:
        info = get_version_info()

    py_fields = [
        ("Version", info["python"]["version"]),
        ("Implementation", info["python"]["implementation"]),
        ("Executable", info["python"]["executable"]),
    ]
    plat_fields = [
        ("System", info["platform"]["system"]),
        ("Release", info["platform"]["release"]),
        ("Machine", info["platform"]["machine"]),
    ]
    dep_items = [
        (pkg, ver if ver else "not installed")
        for pkg, ver in info["dependencies"].items()
    ]

    width = max(len(label) for label, _ in py_fields + plat_fields + dep_items)

    lines = [f"pattern-catalog: {info['pattern_catalog']}", "", "Python:"]
    for label, value in py_fields:
        lines.append(f"  {label:>{width}} : {value}")
    lines.append("")
    lines.append("Platform:")
    for label, value in plat_fields:
        lines.append(f"  {label:>{width}} : {value}")
    lines.append("")
    lines.append("Dependencies:")
    for pkg, ver in dep_items:
        lines.append(f"  {pkg:>{width}} : {ver}")
    return "\n".join(lines)


def print_version_info() -> None:
    """Print version and system information to stdout."""
    print(format_version_info())
