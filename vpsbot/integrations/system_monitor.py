"""Host telemetry via psutil.

Each query returns a short formatted string or raises TelemetryError.
cpu_percent() blocks for the sampling window; call it off the event loop.
"""

import time

import psutil

from vpsbot.core.errors import TelemetryError

CPU_SAMPLE_SECONDS = 0.5
MB = 1024 * 1024
GB = 1024 * MB


class SystemMonitor:
    def __init__(self, disk_path="/"):
        self.disk_path = disk_path

    def cpu_percent(self):
        try:
            usage = psutil.cpu_percent(interval=CPU_SAMPLE_SECONDS)
        except (OSError, psutil.Error) as e:
            raise TelemetryError(str(e)) from e
        return f"{usage:.2f}%"

    def memory_usage(self):
        try:
            mem = psutil.virtual_memory()
        except (OSError, psutil.Error) as e:
            raise TelemetryError(str(e)) from e
        if not mem.total:
            raise TelemetryError("failed to read memory info")
        used = mem.total - mem.available
        return f"{used / mem.total * 100:.1f}% ({used / MB:.0f}MB/{mem.total / MB:.0f}MB)"

    def disk_usage(self):
        try:
            disk = psutil.disk_usage(self.disk_path)
        except (OSError, psutil.Error) as e:
            raise TelemetryError(str(e)) from e
        if not disk.total:
            return "0%"
        used = disk.total - disk.free
        return f"{used / disk.total * 100:.1f}% ({used / GB:.1f}GB/{disk.total / GB:.1f}GB)"

    def uptime(self):
        try:
            booted = psutil.boot_time()
        except (OSError, psutil.Error) as e:
            raise TelemetryError(str(e)) from e
        return format_duration(time.time() - booted)


def format_duration(seconds):
    """1d 2h 3m / 2h 3m / 3m"""
    minutes_total = max(int(seconds), 0) // 60
    days, rest = divmod(minutes_total, 24 * 60)
    hours, minutes = divmod(rest, 60)
    if days:
        return f"{days}d {hours}h {minutes}m"
    if hours:
        return f"{hours}h {minutes}m"
    return f"{minutes}m"
