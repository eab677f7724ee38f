"""Choosing which prepaid package a booking consumes."""

from datetime import datetime

from ..models.packages import LessonPackage, PackageType


def _sort_key(package: LessonPackage) -> tuple:
    # Expiring packages first (soonest first), then the rest; oldest purchase breaks ties
    if package.expiration_date is not None:
        return (0, package.expiration_date, package.purchase_date)
    return (1, package.purchase_date, package.purchase_date)


def rank_packages(
    package_type: PackageType | str,
    packages: list[LessonPackage],
    now: datetime | None = None,
) -> list[LessonPackage]:
    """Usable packages of a type, in the order they should be consumed.

    Args:
        package_type: Requested package type
        packages: All packages of the client
        now: Instant used for expiry checks (defaults to the current time)

    Returns:
        Packages with lessons left and not expired, expiring ones first
    """
    try:
        package_type = PackageType.parse(package_type)
    except ValueError:
        return []

    candidates = []
    for package in packages:
        if package.package_type != package_type:
            continue
        check_time = now or datetime.now(tz=package.purchase_date.tzinfo)
        if package.is_usable_at(check_time):
            candidates.append(package)
    return sorted(candidates, key=_sort_key)


def select_best_package(
    package_type: PackageType | str,
    packages: list[LessonPackage],
    now: datetime | None = None,
) -> str | None:
    """Pick the package to debit for a booking of ``package_type``.

    Returns:
        The package id, or None if no package of that type is usable
    """
    ranked = rank_packages(package_type, packages, now)
    if not ranked:
        return None
    return ranked[0].id


def available_package_types(
    packages: list[LessonPackage], now: datetime | None = None
) -> list[PackageType]:
    """Package types for which at least one package is usable."""
    types = []
    for package_type in PackageType:
        if rank_packages(package_type, packages, now):
            types.append(package_type)
    return types
