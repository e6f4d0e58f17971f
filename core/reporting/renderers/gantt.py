from __future__ import annotations

from datetime import date
from pathlib import Path
from typing import List

import matplotlib.pyplot as plt
import matplotlib.dates as mdates
from matplotlib.dates import date2num
from matplotlib import ticker

from core.services.reporting import GanttTaskBar

STATUS_COLORS = {
    "pending": "#d0d0ff",
    "in_progress": "#ffe08a",
    "completed": "#b8e6b8",
    "cancelled": "#dddddd",
}
SUMMARY_COLOR = "#9aa5b1"


class GanttPngRenderer:
    def render(self, bars: List[GanttTaskBar], output_path: Path, title: str = "Project Gantt Chart") -> Path:
        if not bars:
            raise ValueError("No tasks with dates available for Gantt chart")

        names = [("  " * b.level) + b.name for b in bars]
        start_nums = [date2num(b.start) for b in bars]
        # bars cover whole days, end date included
        widths = [b.duration for b in bars]

        fig, ax = plt.subplots(figsize=(12, max(3, 0.4 * len(bars) + 1.5)))

        for i, (bar, s, w) in enumerate(zip(bars, start_nums, widths)):
            color = SUMMARY_COLOR if bar.is_summary else STATUS_COLORS.get(bar.status, "#d0d0ff")
            height = 0.25 if bar.is_summary else 0.4
            ax.barh(i, w, left=s, height=height, color=color, edgecolor="black", linewidth=0.6)
            if bar.progress > 0 and not bar.is_summary:
                ax.barh(i, w * bar.progress / 100.0, left=s, height=height, color="#8080ff")

        ax.set_yticks(range(len(names)))
        ax.set_yticklabels(names, fontsize=9)
        ax.invert_yaxis()

        locator = mdates.AutoDateLocator(minticks=4, maxticks=10)
        ax.xaxis.set_major_locator(locator)
        ax.xaxis.set_major_formatter(mdates.ConciseDateFormatter(locator))
        ax.xaxis.set_minor_locator(ticker.NullLocator())

        today = date.today()
        if min(b.start for b in bars) <= today <= max(b.end for b in bars):
            ax.axvline(date2num(today), color="red", linestyle="--", linewidth=1)

        ax.set_title(title)
        ax.grid(True, axis="x", linestyle=":", linewidth=0.5)

        fig.tight_layout()
        fig.savefig(output_path, dpi=150)
        plt.close(fig)

        return output_path
