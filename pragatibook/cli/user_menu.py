from __future__ import annotations

import questionary
from rich.console import Console
from rich.table import Table

from pragatibook.errors import ValidationError
from pragatibook.services.user_service import UserService, validate_password

console = Console()


def user_management_menu(user_service: UserService) -> None:
    while True:
        choice = questionary.select(
            "Manage Users",
            choices=[
                "Create User",
                "Change Password",
                "List Users",
                "Back",
            ],
        ).ask()

        if choice is None or choice == "Back":
            break
        elif choice == "Create User":
            _create_user(user_service)
        elif choice == "Change Password":
            _change_password(user_service)
        elif choice == "List Users":
            _list_users(user_service)


def _create_user(user_service: UserService) -> None:
    console.print()
    console.print("[bold]New User[/bold]", style="cyan")

    name = questionary.text("Name:").ask()
    if not name:
        console.print("[yellow]Cancelled.[/yellow]")
        return

    email = questionary.text("Email:").ask()
    if not email:
        console.print("[yellow]Cancelled.[/yellow]")
        return

    password = questionary.password("Password:").ask()
    if not password:
        console.print("[yellow]Cancelled.[/yellow]")
        return

    confirm = questionary.password("Confirm password:").ask()
    if password != confirm:
        console.print("[red]Passwords do not match.[/red]")
        return

    try:
        user = user_service.register(name, email, password)
    except ValidationError as e:
        console.print(f"[red]Could not create user: {e}[/red]")
        return
    console.print(f"[green bold]User '{user.email}' created.[/green bold]")


def _change_password(user_service: UserService) -> None:
    console.print()
    console.print("[bold]Change Password[/bold]", style="cyan")

    users = user_service.list_users()
    if not users:
        console.print("[yellow]No users yet.[/yellow]")
        return

    choices = [u.email for u in users] + ["Back"]
    email = questionary.select("Select user:", choices=choices).ask()
    if email is None or email == "Back":
        return

    password = questionary.password("New password:").ask()
    if not password:
        console.print("[yellow]Cancelled.[/yellow]")
        return

    confirm = questionary.password("Confirm new password:").ask()
    if password != confirm:
        console.print("[red]Passwords do not match.[/red]")
        return

    try:
        validate_password(password)
    except ValidationError as e:
        console.print(f"[red]{e}[/red]")
        return

    user_service.change_password(email, password)
    console.print(f"[green bold]Password for '{email}' changed.[/green bold]")


def _list_users(user_service: UserService) -> None:
    users = user_service.list_users()

    if not users:
        console.print("[yellow]No users yet.[/yellow]")
        return

    table = Table(title="Users")
    table.add_column("#", style="dim")
    table.add_column("Name", style="bold")
    table.add_column("Email")
    table.add_column("Created")

    for u in users:
        created = u.created_at.strftime("%Y-%m-%d %H:%M") if u.created_at else "-"
        table.add_row(str(u.id), u.name, u.email, created)

    console.print()
    console.print(table)
    console.print()
