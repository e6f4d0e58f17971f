from .gantt import GanttTaskBar, GanttTimeline, build_gantt_data

__all__ = ["GanttTaskBar", "GanttTimeline", "build_gantt_data"]
