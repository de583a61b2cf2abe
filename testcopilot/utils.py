"""Shared utilities: paths, colors, output formatting, file discovery."""

from __future__ import annotations

import os
import sys
import tempfile
from pathlib import Path

PROJECT_ROOT = Path(os.environ.get("TESTCOPILOT_ROOT", Path.cwd())).resolve()

# Directories that are never useful to scan; always pruned during traversal.
DEFAULT_EXCLUSIONS = frozenset({
    "node_modules", ".git", "dist", "build", "coverage", ".next", ".nuxt",
    ".output", ".cache", ".turbo", ".svn", ".hg", "__pycache__", ".venv", "venv",
    "screenshots", "videos",
})

TEST_FILE_EXTENSIONS = (".js", ".jsx", ".mjs", ".cjs", ".ts", ".tsx", ".mts", ".cts")
TEST_NAME_MARKERS = (".cy.", ".spec.", ".test.")
TEST_DIR_MARKERS = frozenset({"cypress", "e2e", "playwright"})


# ── Atomic file writes ─────────────────────────────────────


def safe_write_text(filepath: str | Path, content: str) -> None:
    """Atomically write text to a file using temp+rename."""
    p = Path(filepath)
    p.parent.mkdir(parents=True, exist_ok=True)
    fd, tmp = tempfile.mkstemp(dir=p.parent, suffix=".tmp")
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as f:
            f.write(content)
        os.replace(tmp, str(p))
    except BaseException:
        try:
            os.unlink(tmp)
        except OSError:
            pass
        raise


# ── Terminal output ────────────────────────────────────────

COLORS = {
    "reset": "\033[0m",
    "bold": "\033[1m",
    "dim": "\033[2m",
    "red": "\033[31m",
    "green": "\033[32m",
    "yellow": "\033[33m",
    "blue": "\033[34m",
    "cyan": "\033[36m",
}


def _color_disabled() -> bool:
    return os.environ.get("NO_COLOR") is not None or not sys.stdout.isatty()


def colorize(text: str, color: str) -> str:
    if _color_disabled():
        return str(text)
    return f"{COLORS.get(color, '')}{text}{COLORS['reset']}"


def log(msg: str):
    """Print a dim status message to stderr."""
    print(colorize(msg, "dim"), file=sys.stderr)


def print_table(headers: list[str], rows: list[list[str]], widths: list[int] | None = None):
    if not rows:
        return
    if not widths:
        widths = [max(len(str(h)), *(len(str(r[i])) for r in rows)) for i, h in enumerate(headers)]
    header_line = "  ".join(h.ljust(w) for h, w in zip(headers, widths))
    print(colorize(header_line, "bold"))
    print(colorize("─" * (sum(widths) + 2 * (len(widths) - 1)), "dim"))
    for row in rows:
        print("  ".join(str(v).ljust(w) for v, w in zip(row, widths)))


def rel(path: str) -> str:
    try:
        return str(Path(path).resolve().relative_to(PROJECT_ROOT)).replace("\\", "/")
    except ValueError:
        # Outside PROJECT_ROOT (other drive, temp dir): keep the absolute form.
        return str(Path(path).resolve()).replace("\\", "/")


# ── File discovery ─────────────────────────────────────────


def matches_exclusion(rel_path: str, exclusion: str) -> bool:
    """Check if a relative path matches an exclusion pattern (path-component aware).

    "fixtures" matches "cypress/fixtures/a.cy.js" but not "fixturesTool.cy.js";
    "cypress/support" matches everything below that directory.
    """
    parts = Path(rel_path).parts
    if exclusion in parts:
        return True
    if "/" in exclusion or os.sep in exclusion:
        normalized = exclusion.rstrip("/").rstrip(os.sep)
        return rel_path.startswith(normalized + "/") or rel_path.startswith(normalized + os.sep)
    return False


def _is_excluded_dir(name: str, rel_path: str, extra: tuple[str, ...]) -> bool:
    if name in DEFAULT_EXCLUSIONS:
        return True
    return any(matches_exclusion(rel_path, ex) or ex == name for ex in extra)


def is_test_file(rel_path: str) -> bool:
    """JS/TS file named like a test, or living under an e2e test directory."""
    name = Path(rel_path).name
    if not name.endswith(TEST_FILE_EXTENSIONS):
        return False
    if any(marker in name for marker in TEST_NAME_MARKERS):
        return True
    return any(part in TEST_DIR_MARKERS for part in Path(rel_path).parent.parts)


def find_test_files(path: str | Path, exclude: list[str] | tuple[str, ...] = ()) -> list[str]:
    """Test files under *path*, sorted; a file path is returned as-is."""
    root = Path(path)
    if root.is_file():
        return [str(root)]
    extra = tuple(exclude)
    files: list[str] = []
    for dirpath, dirnames, filenames in os.walk(root):
        rel_dir = os.path.relpath(dirpath, root).replace("\\", "/")
        rel_dir = "" if rel_dir == "." else rel_dir + "/"
        # Prune in place so os.walk never descends into excluded dirs.
        dirnames[:] = sorted(
            d for d in dirnames if not _is_excluded_dir(d, rel_dir + d, extra)
        )
        for fname in sorted(filenames):
            rel_file = rel_dir + fname
            if not is_test_file(rel_file):
                continue
            if extra and any(matches_exclusion(rel_file, ex) for ex in extra):
                continue
            files.append(os.path.join(dirpath, fname))
    return sorted(files)


__all__ = [
    "COLORS",
    "DEFAULT_EXCLUSIONS",
    "PROJECT_ROOT",
    "colorize",
    "find_test_files",
    "is_test_file",
    "log",
    "matches_exclusion",
    "print_table",
    "rel",
    "safe_write_text",
]
