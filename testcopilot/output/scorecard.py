"""Scorecard image: codebase reliability score plus a per-file table, as PNG."""

from __future__ import annotations

from pathlib import Path

from testcopilot.models import CodebaseSummary
from testcopilot.utils import PROJECT_ROOT

# Render at 2x for high-DPI crispness
_SCALE = 2
MAX_ROWS = 20
_NAME_WIDTH = 34


def _score_color(score: float) -> tuple[int, int, int]:
    """Green >= 90, amber 60-90, brick red below."""
    if score >= 90:
        return (76, 132, 92)
    if score >= 60:
        return (190, 142, 58)
    return (176, 76, 70)


def _load_font(size: int, *, bold: bool = False, mono: bool = False):
    """Load a font with cross-platform fallback."""
    from PIL import ImageFont

    size = size * _SCALE
    if mono:
        candidates = [
            "/System/Library/Fonts/SFNSMono.ttf",
            "/usr/share/fonts/truetype/dejavu/DejaVuSansMono.ttf",
            "/usr/share/fonts/truetype/liberation/LiberationMono-Regular.ttf",
        ]
    elif bold:
        candidates = [
            "/System/Library/Fonts/HelveticaNeue.ttc",
            "/usr/share/fonts/truetype/dejavu/DejaVuSans-Bold.ttf",
            "/usr/share/fonts/truetype/liberation/LiberationSans-Bold.ttf",
        ]
    else:
        candidates = [
            "/System/Library/Fonts/HelveticaNeue.ttc",
            "/usr/share/fonts/truetype/dejavu/DejaVuSans.ttf",
            "/usr/share/fonts/truetype/liberation/LiberationSans-Regular.ttf",
        ]
    for path in candidates:
        try:
            return ImageFont.truetype(path, size)
        except OSError:
            continue
    return ImageFont.load_default()


def _s(v: int | float) -> int:
    """Scale a layout value."""
    return int(v * _SCALE)


def _short_name(path: str) -> str:
    if len(path) <= _NAME_WIDTH:
        return path
    return "..." + path[-(_NAME_WIDTH - 3):]


def _file_rows(summary: CodebaseSummary) -> list[tuple[str, float, int]]:
    rows = [
        (_short_name(result.file_path), result.numeric_score or 0.0, len(result.issues))
        for result in summary.file_results
    ]
    rows.sort(key=lambda row: (row[1], row[0]))
    return rows[:MAX_ROWS]


def generate_scorecard(summary: CodebaseSummary, output_path: str | Path) -> Path:
    """Render a scorecard PNG for a scan. Returns the output path."""
    from PIL import Image, ImageDraw

    output_path = Path(output_path)
    if not output_path.is_absolute():
        output_path = PROJECT_ROOT / output_path
    output_path.parent.mkdir(parents=True, exist_ok=True)

    font_title = _load_font(16, bold=True)
    font_big = _load_font(44, bold=True)
    font_grade = _load_font(14)
    font_header = _load_font(10, mono=True)
    font_row = _load_font(10, mono=True)
    font_tiny = _load_font(9)

    BG = (246, 247, 249)
    PANEL = (235, 238, 242)
    ROW_ALT = (228, 232, 237)
    TEXT = (34, 40, 49)
    DIM = (110, 118, 129)
    BORDER = (196, 202, 210)

    rows = _file_rows(summary)
    W = _s(460)
    pad = _s(18)
    table_top = _s(150)
    row_h = _s(20)
    table_h = _s(30) + max(1, len(rows)) * row_h + _s(8)
    H = table_top + table_h + _s(36)

    img = Image.new("RGB", (W, H), BG)
    draw = ImageDraw.Draw(img)
    draw.rectangle((0, 0, W - 1, H - 1), outline=BORDER, width=_s(1))

    title = "TESTCOPILOT · TEST RELIABILITY"
    tw = draw.textlength(title, font=font_title)
    draw.text(((W - tw) / 2, _s(14)), title, fill=TEXT, font=font_title)

    # Score panel
    draw.rounded_rectangle(
        (pad, _s(44), W - pad, _s(134)), radius=_s(4), fill=PANEL, outline=BORDER, width=1
    )
    score_str = f"{summary.overall_score:.1f}"
    sw = draw.textlength(score_str, font=font_big)
    draw.text(((W - sw) / 2, _s(50)), score_str, fill=_score_color(summary.overall_score), font=font_big)
    grade_str = f"{summary.overall_grade}  ·  {summary.files_analyzed} files  ·  {summary.total_issues} issues"
    gw = draw.textlength(grade_str, font=font_grade)
    draw.text(((W - gw) / 2, _s(108)), grade_str, fill=DIM, font=font_grade)

    # File table
    draw.rounded_rectangle(
        (pad, table_top, W - pad, table_top + table_h), radius=_s(4), fill=PANEL, outline=BORDER, width=1
    )
    col_name = pad + _s(10)
    col_score = _s(330)
    col_issues = _s(395)
    header_y = table_top + _s(8)
    draw.text((col_name, header_y), "File", fill=DIM, font=font_header)
    draw.text((col_score, header_y), "Score", fill=DIM, font=font_header)
    draw.text((col_issues, header_y), "Issues", fill=DIM, font=font_header)
    line_y = header_y + _s(16)
    draw.rectangle((col_name, line_y, W - pad - _s(10), line_y), fill=BORDER)

    y = line_y + _s(6)
    if not rows:
        draw.text((col_name, y), "(no test files analysed)", fill=DIM, font=font_row)
    for i, (name, score, issue_count) in enumerate(rows):
        if i % 2 == 1:
            draw.rectangle((pad + 1, y - _s(2), W - pad - 1, y + row_h - _s(4)), fill=ROW_ALT)
        draw.text((col_name, y), name, fill=TEXT, font=font_row)
        draw.text((col_score, y), f"{score:.1f}", fill=_score_color(score), font=font_row)
        draw.text((col_issues, y), str(issue_count), fill=TEXT, font=font_row)
        y += row_h

    if summary.failures:
        footer = f"{len(summary.failures)} file(s) could not be analysed"
    else:
        footer = "static analysis of e2e test reliability"
    fw = draw.textlength(footer, font=font_tiny)
    draw.text(((W - fw) / 2, H - _s(24)), footer, fill=DIM, font=font_tiny)

    img.save(str(output_path), "PNG", optimize=True)
    return output_path


__all__ = ["generate_scorecard"]
