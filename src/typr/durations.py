"""Human-readable renderings of the millisecond durations a typing session produces."""
import datetime


def format_millis(millis: int) -> str:
    "Render as e.g. 1m3.5s or 850ms. Negative durations are not expected here."
    if millis == 0:
        return "0"
    if millis < 1000:
        return f"{millis}ms"
    minutes, millis = divmod(millis, 60000)
    parts = []
    if minutes:
        parts.append(f"{minutes}m")
    if millis:
        seconds = millis / 1000
        parts.append(f"{int(seconds) if seconds.is_integer() else seconds}s")
    return "".join(parts)


def timer_display(remaining: datetime.timedelta) -> str:
    # clamp to non-negative values and whole seconds
    seconds = max(0, int(remaining.total_seconds()))
    minutes, seconds = divmod(seconds, 60)
    return "{:02}:{:02}".format(minutes, seconds)
