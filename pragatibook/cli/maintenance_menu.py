from __future__ import annotations

import questionary
from rich.console import Console

from pragatibook.services.otp_service import OTPService, OTPState

console = Console()

_STATE_LABELS = {
    OTPState.NONE: "[dim]no pending reset[/dim]",
    OTPState.UNVERIFIED: "[yellow]code sent, not yet verified[/yellow]",
    OTPState.VERIFIED: "[green]verified, waiting for new password[/green]",
    OTPState.EXPIRED: "[red]expired[/red]",
}


def maintenance_menu(otp_service: OTPService) -> None:
    while True:
        choice = questionary.select(
            "Maintenance",
            choices=[
                "Sweep Expired Reset Codes",
                "Check Reset Status",
                "Back",
            ],
        ).ask()

        if choice is None or choice == "Back":
            break
        elif choice == "Sweep Expired Reset Codes":
            removed = otp_service.sweep_expired()
            console.print(f"[green]Removed {removed} expired record(s).[/green]")
        elif choice == "Check Reset Status":
            _check_status(otp_service)


def _check_status(otp_service: OTPService) -> None:
    email = questionary.text("Email:").ask()
    if not email:
        console.print("[yellow]Cancelled.[/yellow]")
        return
    state = otp_service.state(email.strip())
    console.print(f"{email.strip()}: {_STATE_LABELS[state]}")
