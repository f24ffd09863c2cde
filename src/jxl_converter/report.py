"""Text rendering of run overviews and summaries."""

from __future__ import annotations

from jxl_converter.application.options import RunOptions
from jxl_converter.application.results import RunSummary

SEPARATOR = "-" * 60


def human_size(n: float) -> str:
    """Format a byte count with binary units (``1.5 MiB``)."""
    for unit in ("B", "KiB", "MiB", "GiB", "TiB"):
        if abs(n) < 1024:
            return f"{int(n)} {unit}" if unit == "B" else f"{n:.1f} {unit}"
        n /= 1024
    return f"{n:.1f} PiB"


def _yes_no(flag: bool) -> str:
    return "Yes" if flag else "No"


def format_overview(options: RunOptions) -> str:
    """Aligned key/value overview printed before a run starts."""
    rows = [
        ("Input", str(options.input_root)),
        ("Output", str(options.output_root)),
        ("Recursive", _yes_no(options.recursive)),
        ("Jobs", str(options.jobs)),
        ("Copy All", _yes_no(options.copy_all)),
        ("Format", options.encoder.target_format),
        ("Encoder", f"{options.encoder.name} (effort {options.encoder.effort})"),
        ("Overwrite", _yes_no(options.overwrite)),
    ]
    width = max(len(label) for label, _ in rows)
    lines = [SEPARATOR]
    lines.extend(f"{label:<{width}} : {value}" for label, value in rows)
    lines.append(SEPARATOR)
    return "\n".join(lines)


def format_summary(summary: RunSummary) -> str:
    """Render the final summary, failures enumerated in arrival order.

    Parameters
    ----------
    summary : RunSummary
        Finalized run summary.

    Returns
    -------
    str
        Multi-line report text (no trailing newline).
    """
    lines = [
        SEPARATOR,
        "Processing Summary:" + (" (interrupted)" if summary.interrupted else ""),
        f"  Total files processed: {summary.total_seen}",
        f"  Files converted:       {summary.converted}",
        f"  Files copied:          {summary.copied}",
        f"  Files skipped:         {summary.skipped}",
        f"  Files with errors:     {summary.failed}",
        f"  Total original size (converted files):  {human_size(summary.source_bytes)}",
        f"  Total converted size (converted files): {human_size(summary.output_bytes)}",
        f"  Total storage saved (converted files):  {human_size(summary.saved_bytes)}",
    ]
    if summary.failures:
        lines.append("Failures:")
        for index, failure in enumerate(summary.failures, start=1):
            lines.append(f"  {index}. {failure.path}: [{failure.kind}] {failure.message}")
    lines.append(SEPARATOR)
    return "\n".join(lines)
