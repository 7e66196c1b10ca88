"""Plain-text rendering of an AnalysisResult for terminals and logs."""

NO_THREATS_LINE = "No immediate threats detected"


def threat_lines(result) -> list:
    if not result.threats:
        return [NO_THREATS_LINE]
    return list(result.threats)


def render_text(result, url: str = None) -> str:
    lines = []
    if url is not None:
        lines.append(f"URL: {url}")
    lines.append(f"Status: {result.status.value}")
    lines.append(f"Score: {result.score}/100")
    lines.append("")
    lines.append("Analysis Summary:")
    lines.append(f"  {result.explanation}")
    lines.append("")
    lines.append("Detected Threats:")
    lines.extend(f"  - {line}" for line in threat_lines(result))
    lines.append("")
    lines.append("Recommendations:")
    lines.extend(f"  - {rec}" for rec in result.recommendations)
    return "\n".join(lines)
