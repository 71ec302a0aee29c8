"""Narrative insight report for the CLI."""

from metrix.models.entities import Insight
from metrix.output.formatter import Colors, colorize, print_section


def generate_insight(insight: Insight, color_enabled: bool = True) -> str:
    lines = [print_section("AI ANALYSIS REPORT", color_enabled), insight.summary]

    if insight.anomalies:
        lines.append(print_section("Detected Issues", color_enabled))
        for item in insight.anomalies:
            lines.append(colorize(f"  ! {item}", Colors.RED, color_enabled))

    if insight.recommendations:
        lines.append(print_section("Recommendations", color_enabled))
        for item in insight.recommendations:
            lines.append(colorize(f"  * {item}", Colors.GREEN, color_enabled))

    return '\n'.join(lines)
