"""Table display functionality for logs."""

from typing import Any, List, Optional, Sequence
from tabulate import tabulate
from clonearchitect.logger.base_logger import AlgorithmLogger


class TableLogger(AlgorithmLogger):
    """Extension of AlgorithmLogger with table support."""

    def table(
        self,
        data: List[List[Any]],
        headers: Optional[List[str]] = None,
        title: Optional[str] = None,
        tablefmt: str = "simple",
        colalign: Optional[Sequence[Optional[str]]] = None,
    ) -> None:
        """Display data as a formatted table."""
        if self.disabled:
            return

        if headers is None:
            headers = []

        if title:
            self.logger.info(f"\n{title}:")
            self._html_content.append(f"<h4>{title}</h4>")

        if tablefmt == "html":
            self.raw_html(self._create_html_table(data, headers))
        else:
            ascii_table = tabulate(
                data,
                headers=headers,
                tablefmt=tablefmt,
                colalign=colalign,
                showindex=False,
            )
            self.logger.info(ascii_table)
            self._html_content.append(
                '<div class="table-container">'
                + tabulate(data, headers=headers, tablefmt="html")
                + "</div>"
            )

    def _create_html_table(self, data: List[List[Any]], headers: List[str]) -> str:
        """Create an HTML table wrapped in a scrollable container."""
        return (
            '<div class="table-container" style="overflow-x: auto; margin: 1em 0;">'
            + tabulate(data, headers=headers, tablefmt="unsafehtml")
            + "</div>"
        )
