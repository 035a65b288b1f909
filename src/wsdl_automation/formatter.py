"""
Markup Formatter: a streaming XML re-indenter.

Turns compact XML into human-readable XML in a single pass over a text
stream. An expat parser pushes declaration, element and text events; the
formatter tracks nesting depth and writes each start tag, end tag and text
run on its own line, indented ``depth × indent``.

Start tags are held back until the next event so that an element without
content is written self-closing (``<a />``) and does not increase depth.

Example:
    >>> print(format_xml('<a><b x="1" /><c>text</c></a>', indent_multiplier=2), end="")
    <a>
      <b x="1" />
      <c>
        text
      </c>
    </a>

Guardrails:
    - Do NOT attempt partial recovery from malformed input
      ✅ Raise one FormatterError with the parser message and line
"""

from __future__ import annotations

import io
import textwrap
from dataclasses import dataclass, replace
from typing import Any, TextIO
from xml.parsers import expat
from xml.sax.saxutils import escape

from wsdl_automation.errors import FormatterError


@dataclass(frozen=True)
class FormatterOptions:
    """Formatter settings.

    Attributes:
        buffer_size: Characters read from the input stream per chunk
        indent_string: String repeated for each indentation step
        indent_multiplier: Repetitions of ``indent_string`` per depth level
        format_text: Re-indent and re-wrap text content
        multiline_text: Text content may span several lines
        wrap_width: Wrap text at this column (``None`` disables wrapping)
        input_eol: Line ending expected inside input text
        output_eol: Line ending written to the output
    """

    buffer_size: int = 4096
    indent_string: str = " "
    indent_multiplier: int = 4
    format_text: bool = True
    multiline_text: bool = True
    wrap_width: int | None = 75
    input_eol: str = "\n"
    output_eol: str = "\n"


def _attribute(value: str) -> str:
    return escape(value, {'"': "&quot;"})


class MarkupFormatter:
    """Re-indent an XML document from ``input`` into ``output``.

    Args:
        input: Text stream holding the document
        output: Text stream receiving the formatted document
        options: Formatter settings
    """

    def __init__(
        self,
        input: TextIO,
        output: TextIO,
        options: FormatterOptions | None = None,
    ):
        self.input = input
        self.output = output
        self.options = options or FormatterOptions()
        self.depth = 0
        self._pending: tuple[str, dict[str, str]] | None = None
        self._text: list[str] = []

        self._parser = expat.ParserCreate()
        self._parser.XmlDeclHandler = self._on_declaration
        self._parser.StartElementHandler = self._on_start
        self._parser.EndElementHandler = self._on_end
        self._parser.CharacterDataHandler = self._on_text

    def format(self) -> None:
        """Format the whole input stream.

        Raises:
            FormatterError: The document is not well-formed
        """
        try:
            while True:
                chunk = self.input.read(self.options.buffer_size)
                if not chunk:
                    self._parser.Parse("", True)
                    break
                self._parser.Parse(chunk, False)
        except expat.ExpatError as e:
            raise FormatterError(expat.ErrorString(e.code), e.lineno, cause=e) from e

    # ------------------------------------------------------------------ #
    # Event handlers
    # ------------------------------------------------------------------ #

    def _on_declaration(self, version: str | None, encoding: str | None, standalone: int) -> None:
        decl = f'<?xml version="{version or "1.0"}"'
        if encoding:
            decl += f' encoding="{encoding}"'
        if standalone != -1:
            decl += f' standalone="{"yes" if standalone else "no"}"'
        self._write(decl + "?>")

    def _on_start(self, name: str, attributes: dict[str, str]) -> None:
        self._flush_text()
        self._open_pending()
        self._pending = (name, attributes)

    def _on_end(self, name: str) -> None:
        self._flush_text()
        if self._pending is not None and self._pending[0] == name:
            self._write(self._padding() + self._start_tag(*self._pending, empty=True))
            self._pending = None
            return
        self._open_pending()
        self.depth -= 1
        self._write(f"{self._padding()}</{name}>")

    def _on_text(self, data: str) -> None:
        self._text.append(data)

    # ------------------------------------------------------------------ #
    # Output
    # ------------------------------------------------------------------ #

    def _padding(self) -> str:
        return self.options.indent_string * (self.depth * self.options.indent_multiplier)

    def _write(self, line: str) -> None:
        self.output.write(line + self.options.output_eol)

    @staticmethod
    def _start_tag(name: str, attributes: dict[str, str], empty: bool = False) -> str:
        attrs = "".join(f' {key}="{_attribute(value)}"' for key, value in attributes.items())
        return f"<{name}{attrs}{' />' if empty else '>'}"

    def _open_pending(self) -> None:
        if self._pending is None:
            return
        self._write(self._padding() + self._start_tag(*self._pending))
        self._pending = None
        self.depth += 1

    def _flush_text(self) -> None:
        data = "".join(self._text).strip()
        self._text.clear()
        if not data:
            return
        self._open_pending()
        pad = self._padding()
        self._write(pad + (self.options.output_eol + pad).join(self._text_lines(escape(data))))

    def _text_lines(self, text: str) -> list[str]:
        opts = self.options
        if not opts.format_text:
            return [text]
        if opts.multiline_text:
            lines = [line.strip() for line in text.replace("\t", "").split(opts.input_eol)]
        else:
            lines = [text]
        if opts.wrap_width:
            lines = [
                wrapped
                for line in lines
                for wrapped in (
                    textwrap.wrap(
                        line,
                        opts.wrap_width,
                        break_long_words=False,
                        break_on_hyphens=False,
                    )
                    or [""]
                )
            ]
        return lines


def format_xml(xml: str, options: FormatterOptions | None = None, **overrides: Any) -> str:
    """Format an XML string and return the readable document.

    Args:
        xml: The document
        options: Formatter settings
        **overrides: Individual :class:`FormatterOptions` fields to replace
    """
    options = replace(options or FormatterOptions(), **overrides)
    output = io.StringIO()
    MarkupFormatter(io.StringIO(xml), output, options).format()
    return output.getvalue()
