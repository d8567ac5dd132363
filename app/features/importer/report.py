"""Human-readable import summary."""

from app.features.importer.counters import ImportCounters


def format_report(counters: ImportCounters, sync_error: str | None = None) -> str:
    """Format the final report of an import run.

    Args:
        counters: Final counter values of the run.
        sync_error: Message of a failed sequence sync, if any.

    Returns:
        One summary line, plus a second line when the sequence sync failed.
        Every line ends with a newline.
    """
    report = (
        f"Import finished! Read {counters.total_read} registers, "
        f"{counters.imported_count} imported and {counters.total_errors} errors.\n"
    )
    if sync_error is not None:
        report += f"could not sync sequence: {sync_error}\n"
    return report
