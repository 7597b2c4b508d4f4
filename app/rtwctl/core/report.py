"""Post-install instructions.

Prints MOK enrollment steps when Secure Boot is on, the usual post-install
checks, supported chipsets, and manual uninstall commands.
"""

from pathlib import Path

from rich.panel import Panel
from rich.table import Table

from rtwctl.core.config import InstallerConfig
from rtwctl.utils.formatting import console, print_command, print_info, print_success

SUPPORTED_CHIPSETS: dict[str, tuple[str, ...]] = {
    "PCIe": ("RTL8723DE", "RTL8814AE", "RTL8821CE", "RTL8822BE", "RTL8822CE"),
    "USB": (
        "RTL8723DU",
        "RTL8811CU",
        "RTL8821CU",
        "RTL8822BU",
        "RTL8822CU",
        "RTL8811AU",
        "RTL8812AU",
        "RTL8812BU",
        "RTL8812CU",
        "RTL8814AU",
    ),
    "SDIO": ("RTL8723CS", "RTL8723DS", "RTL8821CS", "RTL8822BS", "RTL8822CS"),
}

MOK_ENROLL_STEPS = (
    "You will be asked to create a password - remember it!",
    "REBOOT your system",
    "During boot, a blue MOK Manager screen will appear",
    "Select 'Enroll MOK' -> Continue -> Enter the password you created",
    "Reboot again",
)


def mok_import_command(key: Path) -> str:
    """Command that queues a MOK key for enrollment."""
    return f"sudo mokutil --import {key}"


def uninstall_commands(config: InstallerConfig) -> list[str]:
    """Commands that undo the installation by hand."""
    target = config.target
    return [
        f"sudo dkms remove {target.dkms_ref} --all",
        f"sudo rm -rf {target.source_dir}",
        f"sudo rm {config.installed_config_path}",
    ]


def _chipset_table() -> Table:
    table = Table(
        title="Supported Chipsets",
        show_header=True,
        header_style="bold_header",
        border_style="border",
    )
    table.add_column("Bus", width=6)
    table.add_column("Chipsets")
    for bus, chips in SUPPORTED_CHIPSETS.items():
        table.add_row(bus, ", ".join(chips))
    return table


def print_mok_instructions(key: Path) -> None:
    """Print the MOK enrollment walkthrough."""
    console.print()
    console.print("[warning]SECURE BOOT IS ENABLED - MOK Enrollment Required![/]")
    console.print()
    print_info("1. Enroll the Machine Owner Key (MOK):")
    print_command(mok_import_command(key))
    for number, step in enumerate(MOK_ENROLL_STEPS, start=2):
        print_info(f"{number}. {step}")


def print_post_install_report(
    config: InstallerConfig,
    *,
    secure_boot: bool,
    mok_key: Path,
    checkout_kept: bool,
) -> None:
    """Print everything the user needs after a successful install.

    Args:
        config: Installer configuration.
        secure_boot: Whether Secure Boot is enabled.
        mok_key: MOK key to enroll when Secure Boot is enabled.
        checkout_kept: Whether the source checkout stays on disk.
    """
    console.print()
    print_success("Installation completed successfully!")
    console.print(Panel("NEXT STEPS", border_style="border", style="bold_header"))

    if secure_boot:
        print_mok_instructions(mok_key)

    console.print()
    print_info("After reboot (or if Secure Boot is disabled):")
    print_info("  1. Your WiFi adapter should work automatically")
    print_info("  2. Check loaded modules:")
    print_command("lsmod | grep rtw")
    print_info("  3. Check WiFi interfaces:")
    print_command("ip link show")
    print_info("  4. Your adapter should appear (usually wlan0 or wlp*)")
    console.print()
    console.print(_chipset_table())

    if checkout_kept:
        console.print()
        print_info("To uninstall:")
        for command in uninstall_commands(config):
            print_command(command)
    console.print()
