"""
Report renderers for tests.

Each renderer produces the text a build tool would write. ReportWorkspace
puts them at the locations a BuildParameters points to.
"""

import json
from html import escape
from pathlib import Path

from gamekins.models.files import BuildParameters, SourceFileDetails

CART_PATH = "src/main/java/org/example/Cart.java"

# (number, status, text, title) of the instrumented lines of Cart.java
CART_LINES = [
    (7, "pc", "if (item == null) {", "1 of 2 branches missed."),
    (8, "nc", 'throw new IllegalArgumentException("item");', ""),
    (10, "fc", "items.add(item);", ""),
    (13, "nc", "return items.size();", ""),
    (16, "fc", "items.clear();", ""),
]

# (name, first line) of the methods of Cart.java
CART_METHODS = [("add(Item)", 7), ("total()", 13), ("clear()", 16)]


def source_page(lines, complete: bool = True) -> str:
    """Render a JaCoCo source page."""
    rows = []
    for number, status, text, title in lines:
        css = f"{status} b{status}" if title else status
        title_attr = f' title="{escape(title)}"' if title else ""
        rows.append(f'<span class="{css}" id="L{number}"{title_attr}>{escape(text)}</span>')
    body = "\n".join(rows)
    page = (
        "<html><head><title>Cart.java</title></head><body>"
        '<span class="el_source">Cart.java</span>'
        f'<pre class="source lang-java linenums">\n{body}\n</pre>'
        "</body>"
    )
    return page + "</html>" if complete else page


def class_page(file_name: str, methods, extension: str = "java") -> str:
    """Render a JaCoCo class page with one row per method."""
    rows = "".join(
        f'<tr><td><a href="{file_name}.{extension}.html#L{first_line}" '
        f'class="el_method">{escape(name)}</a></td></tr>'
        for name, first_line in methods
    )
    return f"<html><body><table><tbody>{rows}</tbody></table></body></html>"


def jacoco_csv(rows) -> str:
    """Render the JaCoCo CSV from (package, class, missed, covered) rows."""
    lines = ["GROUP,PACKAGE,CLASS,LINE_MISSED,LINE_COVERED"]
    lines.extend(f"shop,{package},{name},{missed},{covered}" for package, name, missed, covered in rows)
    return "\n".join(lines) + "\n"


def mutation(
    mutated_class: str,
    method: str = "add",
    line: int = 7,
    status: str = "SURVIVED",
    description: str = "negated conditional",
    mutator: str = "org.pitest.mutationtest.engine.gregor.mutators.NegateConditionalsMutator",
) -> str:
    """Render a single PIT mutation element."""
    detected = "true" if status == "KILLED" else "false"
    return (
        f"<mutation detected='{detected}' status='{status}' numberOfTestsRun='1'>"
        f"<sourceFile>{mutated_class.rsplit('.', 1)[-1]}.java</sourceFile>"
        f"<mutatedClass>{mutated_class}</mutatedClass>"
        f"<mutatedMethod>{method}</mutatedMethod>"
        "<methodDescription>(Lorg/example/Item;)V</methodDescription>"
        f"<lineNumber>{line}</lineNumber>"
        f"<mutator>{mutator}</mutator>"
        f"<description>{description}</description>"
        "</mutation>"
    )


def mutations_xml(mutations) -> str:
    lines = ["<?xml version='1.0' encoding='UTF-8'?>", "<mutations>"]
    lines.extend(mutations)
    lines.append("</mutations>")
    return "\n".join(lines) + "\n"


def smells_json(findings, wrapped: bool = False) -> str:
    """Render smell findings from (file, rule, message, line) tuples."""
    issues = [
        {"file": file_path, "rule": rule, "message": message, "line": line}
        for file_path, rule, message, line in findings
    ]
    return json.dumps({"issues": issues} if wrapped else issues)


def junit_xml(suite_name: str, test_names) -> str:
    cases = "".join(
        f'<testcase name="{name}" classname="{suite_name}" time="0.01"/>' for name in test_names
    )
    return (
        f'<?xml version="1.0" encoding="UTF-8"?>'
        f'<testsuite name="{suite_name}" tests="{len(test_names)}" failures="0">{cases}</testsuite>'
    )


class ReportWorkspace:
    """Writes reports where the build parameters expect them."""

    def __init__(self, parameters: BuildParameters):
        self.parameters = parameters

    @staticmethod
    def _write(path: Path, text: str) -> Path:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(text, encoding="utf-8")
        return path

    def touch_source(self, file_path: str) -> Path:
        return self._write(self.parameters.resolve(file_path), "// source\n")

    def write_source_page(self, details: SourceFileDetails, lines=CART_LINES, complete=True) -> Path:
        return self._write(details.source_report(self.parameters), source_page(lines, complete))

    def write_class_page(self, details: SourceFileDetails, methods=CART_METHODS) -> Path:
        return self._write(
            details.method_report(self.parameters),
            class_page(details.file_name, methods, details.file_extension),
        )

    def write_csv(self, rows) -> Path:
        return self._write(self.parameters.jacoco_csv_file, jacoco_csv(rows))

    def write_mutations(self, mutations) -> Path:
        return self._write(self.parameters.mutation_report_file, mutations_xml(mutations))

    def write_smells(self, findings, wrapped: bool = False) -> Path:
        return self._write(self.parameters.smells_report_file, smells_json(findings, wrapped))

    def write_smells_text(self, text: str) -> Path:
        return self._write(self.parameters.smells_report_file, text)

    def write_junit(self, suite_name: str, test_names) -> Path:
        return self._write(
            self.parameters.junit_results_dir / f"TEST-{suite_name}.xml",
            junit_xml(suite_name, test_names),
        )

    def write_cart(self, details: SourceFileDetails) -> None:
        """Source file, both JaCoCo pages and the CSV of Cart.java."""
        self.touch_source(details.file_path)
        self.write_source_page(details)
        self.write_class_page(details)
        self.write_csv([(details.package_name, details.file_name, 2, 3)])
