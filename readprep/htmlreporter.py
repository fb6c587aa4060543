"""HTML report pieces: number formatting, table rows, page frame and insert size plot."""

from __future__ import annotations

import math
from collections.abc import Callable, Sequence
from datetime import datetime

from .common import VERSION

_UNITS = ("", "K", "M", "G", "T", "P", "E", "Z", "Y")

_CSS_RULES = (
    "td {border:1px solid #dddddd;padding:5px;font-size:12px;}",
    "table {border:1px solid #999999;padding:2x;border-collapse:collapse; width:800px}",
    ".col1 {width:240px; font-weight:bold;}",
    ".adapter_col {width:500px; font-size:10px;}",
    "img {padding:30px;}",
    "#menu {font-family:Consolas, 'Liberation Mono', Menlo, Courier, monospace;}",
    "#menu a {color:#0366d6; font-size:18px;font-weight:600;line-height:28px;"
    "text-decoration:none;font-family:-apple-system, BlinkMacSystemFont, 'Segoe UI', "
    "Helvetica, Arial, sans-serif, 'Apple Color Emoji', 'Segoe UI Emoji', 'Segoe UI Symbol'}",
    "a:visited {color: #999999}",
    ".alignleft {text-align:left;}",
    ".alignright {text-align:right;}",
    ".figure {width:800px;height:600px;}",
    ".header {color:#ffffff;padding:1px;height:20px;background:#000000;}",
    ".section_title {color:#ffffff;font-size:20px;padding:5px;text-align:left;"
    "background:#663355; margin-top:10px;}",
    ".subsection_title {font-size:16px;padding:5px;margin-top:10px;text-align:left;color:#663355}",
    "#container {text-align:center;padding:3px 3px 3px 10px;"
    "font-family:Arail,'Liberation Mono', Menlo, Courier, monospace;}",
    ".menu_item {text-align:left;padding-top:5px;font-size:18px;}",
    ".highlight {text-align:left;padding-top:30px;padding-bottom:30px;"
    "font-size:20px;line-height:35px;}",
    "#helper {text-align:left;border:1px dotted #fafafa;color:#777777;font-size:12px;}",
    "#footer {text-align:left;padding:15px;color:#ffffff;font-size:10px;background:#663355;"
    "font-family:Arail,'Liberation Mono', Menlo, Courier, monospace;}",
    ".kmer_table {text-align:center;font-size:8px;padding:2px;}",
    ".kmer_table td{text-align:center;font-size:8px;padding:0px;color:#ffffff}",
    ".sub_section_tips {color:#999999;font-size:10px;padding-left:5px;padding-bottom:3px;}",
)


def _fixed(value: float) -> str:
    """Format a float with six decimals, as reports show them."""
    return f"{value:f}"


def _join(values: Sequence[float]) -> str:
    return ",".join(str(v) for v in values)


def format_number(number: int) -> str:
    """Scale a count by thousands and attach a unit (K, M, G, ...)."""
    num = float(number)
    order = 0
    while num > 1000.0 and order < len(_UNITS) - 1:
        order += 1
        num /= 1000.0
    if order == 0:
        return str(number)
    return f"{_fixed(num)} {_UNITS[order]}"


def get_percents(numerator: int, denominator: int) -> str:
    """Return numerator/denominator as a percentage string; '0.0' for a zero denominator."""
    if denominator == 0:
        return "0.0"
    return _fixed(numerator * 100.0 / denominator)


def output_row(key: str, value) -> str:
    """Return one two-column summary table row."""
    return f"<tr><td class='col1'>{key}</td><td class='col2'>{value}</td></tr>\n"


class HtmlReporter:
    """Builds the shared parts of the HTML report."""

    def __init__(
        self,
        command: str = "",
        plotly_src: str = "plotly.min.js",
        clock: Callable[[], datetime] = datetime.now,
    ) -> None:
        self.command = command
        self.plotly_src = plotly_src
        self.clock = clock
        self.dup_rate = 0.0
        self.insert_hist: list[int] | None = None
        self.insert_size_peak = 0

    def set_dup(self, dup_rate: float) -> None:
        self.dup_rate = dup_rate

    def set_insert_hist(self, insert_hist: Sequence[int], insert_size_peak: int) -> None:
        self.insert_hist = list(insert_hist)
        self.insert_size_peak = insert_size_peak

    def _current_time(self) -> str:
        return self.clock().strftime("%Y-%m-%d      %H:%M:%S")

    def _js(self) -> str:
        return (
            f"<script src='{self.plotly_src}'></script>\n"
            "\n<script type=\"text/javascript\">\n"
            "    function showOrHide(divname) {\n"
            "        div = document.getElementById(divname);\n"
            "        if(div.style.display == 'none')\n"
            "            div.style.display = 'block';\n"
            "        else\n"
            "            div.style.display = 'none';\n"
            "    }\n"
            "</script>\n"
        )

    def _css(self) -> str:
        body = "".join(rule + "\n" for rule in _CSS_RULES)
        return f"<style type=\"text/css\">\n{body}</style>\n"

    def header(self) -> str:
        """Return the page head and the opening of the body."""
        return (
            "<html><head><meta http-equiv=\"content-type\" "
            "content=\"text/html;charset=utf-8\" />"
            f"<title>fastp report at {self._current_time()} </title>"
            + self._js()
            + self._css()
            + "</head>"
            + "<body><div id='container'>"
        )

    def footer(self) -> str:
        """Return the footer with the command line, version and time."""
        return (
            "\n</div>\n"
            "<div id='footer'> "
            f"<p>{self.command}</p>"
            f"fastp {VERSION}, at {self._current_time()} </div>"
            "</body></html>"
        )

    def insert_size_section(self, isize_limit: int, insert_size_max: int, overlap_require: int) -> str:
        """Return the insert size plot; the last histogram bin counts unknown sizes."""
        if self.insert_hist is None:
            raise RuntimeError("insert size histogram has not been set")
        hist = self.insert_hist
        if len(hist) <= insert_size_max:
            raise ValueError(
                f"insert size histogram needs {insert_size_max + 1} bins, got {len(hist)}"
            )
        isize_limit = max(isize_limit, 1)
        total = min(insert_size_max, isize_limit)
        shown = hist[:total]
        unknown = hist[insert_size_max]
        all_count = float(sum(shown) + unknown)
        if all_count > 0:
            percents = [count * 100.0 / all_count for count in shown]
            unknown_percents = unknown * 100.0 / all_count
        else:
            percents = [0.0] * total
            unknown_percents = math.nan
        unknown_text = _fixed(unknown_percents)

        parts = [
            "<div id='insert_size_figure'>\n",
            "<div class='figure' id='plot_insert_size' style='height:400px;'></div>\n",
            "</div>\n",
            "<div class='sub_section_tips'>This estimation is based on paired-end overlap "
            "analysis, and there are ",
            unknown_text,
            "% reads found not overlapped. <br /> The nonoverlapped read pairs may have "
            f"insert size &lt;{overlap_require}",
            f" or &gt;{isize_limit}",
            ", or contain too much sequencing errors to be detected as overlapped.",
            "</div>\n",
            "\n<script type=\"text/javascript\">\n",
            "var data=[{",
            f"x:[{_join(range(total))}],",
            f"y:[{_join(percents)}],",
            "name: 'Percent (%)  ',",
            "type:'bar',",
            "line:{color:'rgba(128,0,128,1.0)', width:1}\n",
            "}];\n",
            f"var layout={{title:'Insert size distribution ({unknown_text}% reads are with "
            "unknown length)', xaxis:{title:'Insert size'}, "
            "yaxis:{title:'Read percent (%)'}};\n",
            "Plotly.newPlot('plot_insert_size', data, layout);\n",
            "</script>\n",
        ]
        return "".join(parts)