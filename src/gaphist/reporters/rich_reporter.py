from __future__ import annotations

from rich import box
from rich.console import Console
from rich.rule import Rule
from rich.table import Table
from rich.text import Text

from gaphist.contracts import Reporter
from gaphist.models import HistogramSummary, QuantileReport


class RichReporter(Reporter):
    """Render quantile reports using Rich tables."""

    def __init__(self, console: Console | None = None, show_bins: bool = False) -> None:
        self._console = console or Console()
        self._show_bins = show_bins

    def render(self, report: QuantileReport, title: str) -> None:
        self._console.print()
        self._console.print(f"Quantiles for {title}", style="bold underline")
        self._console.print(Rule(style="dim"))

        self._console.print(self._build_summary_section(report.histogram))
        self._console.print()

        self._console.print(self._build_quantile_table(report))
        if report.r_squared is not None:
            self._console.print(self._build_fit_line(report.r_squared))
        self._console.print()

        if self._show_bins:
            self._render_bins(report.histogram)

    @staticmethod
    def _build_summary_section(summary: HistogramSummary) -> Table:
        table = Table.grid(padding=(0, 3))
        table.add_column("Field", style="bold cyan")
        table.add_column("Value")

        table.add_row("count:", f"{summary.count:,}")
        table.add_row("bins:", f"{summary.bins} / {summary.max_bins}")
        table.add_row("min:", f"{summary.min:.6f}")
        table.add_row("max:", f"{summary.max:.6f}")
        return table

    @staticmethod
    def _build_quantile_table(report: QuantileReport) -> Table:
        table = Table(
            box=box.SIMPLE_HEAD,
            show_header=True,
            header_style="bold",
            padding=(0, 2),
        )
        table.add_column("Quantile", justify="right")
        table.add_column("Approximate", justify="right")
        if report.exact is not None:
            table.add_column("Exact", justify="right")
            table.add_column("Error", justify="right")

        for index, quantile in enumerate(report.quantiles):
            approximate = report.approximate[index]
            row = [f"{quantile:.3f}", f"{approximate:.6f}"]
            if report.exact is not None:
                exact = report.exact[index]
                row.extend([f"{exact:.6f}", f"{approximate - exact:+.6f}"])
            table.add_row(*row)
        return table

    @staticmethod
    def _build_fit_line(score: float) -> Text:
        style = "green" if score >= 0.9 else "red bold"
        line = Text("r_squared: ", style="bold cyan")
        line.append(f"{score:.6f}", style=style)
        return line

    def _render_bins(self, summary: HistogramSummary) -> None:
        self._console.print(f"Bins ({len(summary.bin_list)})", style="bold")
        self._console.print(Rule(style="dim"))

        if not summary.bin_list:
            self._console.print("[dim]None[/dim]")
            return

        table = Table(
            box=box.SIMPLE_HEAD,
            show_header=True,
            header_style="bold",
            padding=(0, 2),
        )
        table.add_column("Centroid", justify="right")
        table.add_column("Count", justify="right")
        for entry in summary.bin_list:
            table.add_row(f"{entry.centroid:.6f}", f"{entry.count:,}")
        self._console.print(table)
