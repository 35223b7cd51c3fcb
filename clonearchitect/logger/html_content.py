CSS_LOG = """
/* Base styles */
body {
    font-family: -apple-system, BlinkMacSystemFont, "Segoe UI", Roboto, sans-serif;
    background: #1e1e1e;
    color: #e0e0e0;
}

.content {
    max-width: 1200px;
    margin: 0 auto;
    padding: 1em;
}

.section {
    margin: 1.5em 0;
    padding: 1em;
    background: #2d2d2d;
    border-radius: 4px;
}

.subsection h4 {
    color: #9cdcfe;
    margin: 1em 0 0.5em;
}

.info { color: #e0e0e0; }
.debug { color: #8a8a8a; font-size: 90%; }
.warning { color: #ffcc66; }
.error { color: #ff8080; font-weight: bold; }

.result {
    margin: 0.5em 0;
    padding: 0.5em;
    border-left: 3px solid #4ec9b0;
}

.table-container table {
    border-collapse: collapse;
}

.table-container td, .table-container th {
    border: 1px solid #444;
    padding: 4px 12px;
}

.lineage-tree {
    font-family: monospace;
    white-space: pre;
}
"""

HTML_TEMPLATE = """<!DOCTYPE html>
<html>
<head>
<meta charset="utf-8">
<title>{title}</title>
<style>
{css}
</style>
</head>
<body>
{body}
</body>
</html>
"""
