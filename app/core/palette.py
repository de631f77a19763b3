"""Fixed lookup tables for alert presentation (colors and emoji)."""

from types import MappingProxyType

DEFAULT_STATUS_COLOR = "#6B7280FF"
DEFAULT_ALERT_EMOJI = "📢"

ALERT_LEVEL_COLORS = MappingProxyType(
    {
        "low": MappingProxyType({"background": "#8C8C8CFF", "text": "#FFFFFFFF"}),
        "medium": MappingProxyType({"background": "#6699FFFF", "text": "#FFFFFFFF"}),
        "high": MappingProxyType({"background": "#E68A00FF", "text": "#FFFFFFFF"}),
        "monster": MappingProxyType({"background": "#CC3300FF", "text": "#FFFFFFFF"}),
    }
)

STATUS_COLORS = MappingProxyType(
    {
        "Questionable": "#6699FFFF",
        "Injured": "#EF4444FF",
        "Starting": "#10B981FF",
        "Note": "#6B7280FF",
        "Doubtful": "#F97316FF",
        "Out": "#DC2626FF",
        "In Locker Room": "#F59E0BFF",
        "Playing": "#059669FF",
        "Off Injury Report": "#3B82F6FF",
    }
)

ALERT_EMOJIS = MappingProxyType(
    {
        "low": "ℹ️",
        "medium": "⚠️",
        "high": "🔥",
        "monster": "🚨",
    }
)


def resolve_status_color(status: str | None, status_color: str | None = None) -> str:
    if status_color:
        return status_color
    return STATUS_COLORS.get(status or "", DEFAULT_STATUS_COLOR)


def alert_emoji(level: str | None) -> str:
    return ALERT_EMOJIS.get((level or "").lower(), DEFAULT_ALERT_EMOJI)


def level_colors_payload() -> dict[str, dict[str, str]]:
    return {level: dict(colors) for level, colors in ALERT_LEVEL_COLORS.items()}
