"""Loaded kernel module queries (lsmod / modprobe)."""

import logging

from rtwctl.utils.shell import CommandResult, run_command

logger = logging.getLogger(__name__)


def parse_lsmod(output: str, prefix: str) -> list[str]:
    """Extract module names starting with ``prefix`` from lsmod output.

    Order is preserved: lsmod lists the most recently loaded modules,
    which depend on the ones below them, first.

    Args:
        output: Raw lsmod stdout.
        prefix: Module name prefix (e.g., 'rtw_').

    Returns:
        Matching module names.
    """
    modules: list[str] = []
    for line in output.splitlines():
        if not line.startswith(prefix):
            continue
        name = line.split()[0]
        modules.append(name)
    return modules


def loaded_modules(prefix: str) -> list[str]:
    """List loaded kernel modules whose name starts with ``prefix``.

    Returns an empty list if lsmod is unavailable or fails.
    """
    try:
        result = run_command(["lsmod"])
    except (FileNotFoundError, OSError):
        return []
    if not result.success:
        return []
    return parse_lsmod(result.stdout, prefix)


def unload_module(name: str) -> CommandResult:
    """Unload a kernel module with ``modprobe -r``."""
    logger.info("Unloading module %s", name)
    return run_command(["sudo", "modprobe", "-r", name])
