import questionary
from rich.console import Console
from sqlalchemy import Connection

from pragatibook.cli.maintenance_menu import maintenance_menu
from pragatibook.cli.user_menu import user_management_menu
from pragatibook.db import connect
from pragatibook.repositories.factory import get_otp_repository, get_user_repository
from pragatibook.services.otp_service import OTPService
from pragatibook.services.user_service import UserService
from pragatibook.settings import settings

console = Console()


def _build_services(conn: Connection) -> tuple[UserService, OTPService]:
    return (
        UserService(get_user_repository(conn)),
        OTPService(get_otp_repository(conn)),
    )


def main_menu() -> None:
    with connect() as conn:
        _run(*_build_services(conn))


def _run(user_service: UserService, otp_service: OTPService) -> None:
    console.print()
    console.print(f"[bold]{settings.app_name} Admin[/bold]", style="cyan")
    console.print()

    while True:
        choice = questionary.select(
            "Main Menu",
            choices=[
                "Manage Users",
                "Maintenance",
                "Exit",
            ],
        ).ask()

        if choice is None or choice == "Exit":
            console.print("[bold]Goodbye![/bold]")
            break
        elif choice == "Manage Users":
            user_management_menu(user_service)
        elif choice == "Maintenance":
            maintenance_menu(otp_service)
