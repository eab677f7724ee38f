"""Lesson package commands."""

from datetime import datetime, timedelta
from uuid import uuid4

import click

from ..db import ClientRepository, LessonPackageRepository
from ..models.packages import LessonPackage, PackageType
from ..rules.package_allocation import select_best_package
from .base import (
    async_command,
    echo_error,
    echo_info,
    echo_success,
    ensure_initialized,
    format_table,
    get_db_path_from_ctx,
)

PACKAGE_TYPE_CHOICES = [t.value for t in PackageType]


@click.group()
def packages():
    """Manage clients' prepaid lesson packages."""
    pass


@packages.command("add")
@click.argument("client_id")
@click.option(
    "--type",
    "package_type",
    type=click.Choice(PACKAGE_TYPE_CHOICES),
    default=PackageType.PRIVATE.value,
    show_default=True,
)
@click.option("--lessons", type=int, default=10, show_default=True, help="Lessons in the package")
@click.option("--expires-in", type=int, help="Days until the package expires")
@click.option("--transaction", "transaction_id", help="Payment transaction ID")
@click.pass_context
@async_command
async def add(
    ctx: click.Context,
    client_id: str,
    package_type: str,
    lessons: int,
    expires_in: int | None,
    transaction_id: str | None,
):
    """Record a purchased package for a client."""
    ensure_initialized(ctx)
    db_path = get_db_path_from_ctx(ctx)

    if await ClientRepository(db_path).get(client_id) is None:
        echo_error(f"Client {client_id} not found.")
        ctx.exit(1)

    now = datetime.now()
    package = LessonPackage(
        id=uuid4().hex[:12],
        client_id=client_id,
        package_type=PackageType(package_type),
        total_lessons=lessons,
        purchase_date=now,
        expiration_date=now + timedelta(days=expires_in) if expires_in else None,
        transaction_id=transaction_id,
    )
    await LessonPackageRepository(db_path).create(package)
    echo_success(f"Package {package.id} ({package.package_type.display_name}) added")


@packages.command("list")
@click.argument("client_id")
@click.pass_context
@async_command
async def list_packages(ctx: click.Context, client_id: str):
    """List a client's packages.

    The package that the next booking of each type would use is marked
    with an asterisk.
    """
    ensure_initialized(ctx)

    found = await LessonPackageRepository(get_db_path_from_ctx(ctx)).list_for_client(
        client_id
    )
    if not found:
        echo_info("No packages found.")
        return

    next_up = {select_best_package(t, found) for t in PackageType}
    rows = []
    for package in found:
        rows.append(
            [
                ("* " if package.id in next_up else "  ") + package.id,
                package.package_type.display_name,
                package.status_text(),
                package.purchase_date.strftime("%Y-%m-%d"),
                (
                    package.expiration_date.strftime("%Y-%m-%d")
                    if package.expiration_date
                    else "-"
                ),
            ]
        )
    click.echo(format_table(["ID", "Type", "Status", "Purchased", "Expires"], rows))
