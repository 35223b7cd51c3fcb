"""Base logging functionality for lineage reconstruction tracing."""

import logging
from html import escape
from pathlib import Path
from typing import List, Union

from clonearchitect.logger.html_content import CSS_LOG, HTML_TEMPLATE


class AlgorithmLogger:
    """
    Trace logger that writes to a standard ``logging`` logger and keeps an
    HTML transcript of the same messages.

    Every method is a no-op while ``disabled`` is set, so call sites in hot
    code paths guard with ``if not logger.disabled:`` before formatting.
    """

    def __init__(self, name: str):
        self.name = name
        self.disabled = False
        self._html_content: List[str] = []
        self._section_open = False

        self.logger = logging.getLogger(name)
        # one handler per logger name; instances sharing a name share it
        if not self.logger.handlers:
            handler = logging.StreamHandler()
            handler.setFormatter(logging.Formatter("%(message)s"))
            self.logger.addHandler(handler)
        if self.logger.level == logging.NOTSET:
            self.logger.setLevel(logging.INFO)
        self.logger.propagate = False

    def _emit(self, level: int, css_class: str, message: str) -> None:
        if self.disabled:
            return
        self.logger.log(level, message)
        self._html_content.append(f'<p class="{css_class}">{escape(message)}</p>')

    def section(self, title: str):
        """Start a new section, closing the previous one."""
        if self.disabled:
            return
        self._close_section()
        self.logger.info(f"\n{'=' * 20} {title} {'=' * 20}\n")
        self._html_content.append(f'<section class="section"><h3>{escape(title)}</h3>')
        self._section_open = True

    def subsection(self, title: str):
        if self.disabled:
            return
        self.logger.info(f"\n{'-' * 15} {title} {'-' * 15}\n")
        self._html_content.append(f'<div class="subsection"><h4>{escape(title)}</h4></div>')

    def info(self, message: str):
        self._emit(logging.INFO, "info", message)

    def warning(self, message: str):
        self._emit(logging.WARNING, "warning", message)

    def error(self, message: str):
        self._emit(logging.ERROR, "error", message)

    def debug(self, message: str):
        self._emit(logging.DEBUG, "debug", message)

    def raw_html(self, html_content: str):
        """Append pre-rendered HTML to the transcript only."""
        if self.disabled:
            return
        self._html_content.append(html_content)

    def _close_section(self) -> None:
        if self._section_open:
            self._html_content.append("</section>")
            self._section_open = False

    def clear(self):
        """Drop the accumulated transcript."""
        self._html_content = []
        self._section_open = False

    def get_html_content(self) -> str:
        """The transcript body, with any open section closed."""
        parts = ['<div class="content">', *self._html_content]
        if self._section_open:
            parts.append("</section>")
        parts.append("</div>")
        return "\n".join(parts)

    def write_html(self, path: Union[str, Path], title: str = "") -> Path:
        """Write the transcript as a standalone HTML page."""
        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(
            HTML_TEMPLATE.format(
                title=escape(title or self.name),
                css=CSS_LOG,
                body=self.get_html_content(),
            ),
            encoding="utf-8",
        )
        return path
