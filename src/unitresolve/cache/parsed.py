"""
Parsed representation of a single Go source file.

The scanner here is line-oriented: it recognizes the package clause,
import declarations and, in FULL mode, top-level declarations. That is
enough for the snapshot to group files into packages and to report
files whose package clause is missing or inconsistent.
"""

import re
from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional

from unitresolve.protocol import DocumentURI


class ParseMode(Enum):
    HEADER = "header"  # package clause and imports only
    FULL = "full"


@dataclass
class ImportSpec:
    path: str
    name: Optional[str]
    line: int


@dataclass
class Decl:
    kind: str  # 'func', 'method', 'type', 'var', 'const'
    name: str
    line: int
    receiver: Optional[str] = None


@dataclass
class ParseError:
    line: int
    message: str

    def __str__(self) -> str:
        return f"{self.line}: {self.message}"


@dataclass
class ParsedFile:
    uri: DocumentURI
    mode: ParseMode
    src: str
    package_name: Optional[str] = None
    package_line: int = 0
    imports: List[ImportSpec] = field(default_factory=list)
    decls: List[Decl] = field(default_factory=list)
    parse_errors: List[ParseError] = field(default_factory=list)

    def line_count(self) -> int:
        return len(self.src.splitlines())

    def line_text(self, line: int) -> str:
        """Return the 1-based line, or '' past the end of the file."""
        lines = self.src.splitlines()
        if 1 <= line <= len(lines):
            return lines[line - 1]
        return ""

    def offset(self, line: int, column: int) -> int:
        """Convert a 1-based line and 0-based column to a byte offset into src."""
        lines = self.src.splitlines(keepends=True)
        if line < 1 or line > len(lines) + 1:
            raise ValueError(f"line {line} out of range [1, {len(lines) + 1}]")
        return sum(len(l) for l in lines[:line - 1]) + column

    def find_decl(self, name: str) -> Optional[Decl]:
        for decl in self.decls:
            if decl.name == name:
                return decl
        return None


_PACKAGE_RE = re.compile(r"^package\s+([A-Za-z_][A-Za-z0-9_]*)\s*(?://.*)?$")
_IMPORT_SINGLE_RE = re.compile(r'^import\s+(?:([A-Za-z_.][A-Za-z0-9_]*)\s+)?"([^"]+)"')
_IMPORT_GROUP_START_RE = re.compile(r"^import\s*\($")
_IMPORT_SPEC_RE = re.compile(r'^(?:([A-Za-z_.][A-Za-z0-9_]*)\s+)?"([^"]+)"')
_FUNC_RE = re.compile(r"^func\s+([A-Za-z_][A-Za-z0-9_]*)\s*[\[(]")
_METHOD_RE = re.compile(r"^func\s+\(\s*(?:[A-Za-z_][A-Za-z0-9_]*\s+)?\*?([A-Za-z_][A-Za-z0-9_]*)[^)]*\)\s*([A-Za-z_][A-Za-z0-9_]*)\s*\(")
_SPEC_DECL_RE = re.compile(r"^(type|var|const)\s+([A-Za-z_][A-Za-z0-9_]*)\b")
_BLOCK_DECL_RE = re.compile(r"^(type|var|const)\s*\($")
_BLOCK_SPEC_RE = re.compile(r"^([A-Za-z_][A-Za-z0-9_]*)\b")


def _strip_comments(src: str) -> List[str]:
    """Blank out comments, keeping line numbering intact."""
    out = []
    in_block = False
    for raw in src.splitlines():
        line = raw
        result = ""
        while line:
            if in_block:
                end = line.find("*/")
                if end < 0:
                    line = ""
                else:
                    line = line[end + 2:]
                    in_block = False
            else:
                start_block = line.find("/*")
                start_line = line.find("//")
                if start_line >= 0 and (start_block < 0 or start_line < start_block):
                    result += line[:start_line]
                    line = ""
                elif start_block >= 0:
                    result += line[:start_block]
                    line = line[start_block + 2:]
                    in_block = True
                else:
                    result += line
                    line = ""
        out.append(result.rstrip())
    return out


def parse_file(uri: DocumentURI, src: bytes, mode: ParseMode = ParseMode.FULL) -> ParsedFile:
    """
    Parse Go source. Never raises on malformed input; problems are
    collected in ParsedFile.parse_errors.
    """
    text = src.decode("utf-8", errors="replace")
    pgf = ParsedFile(uri=uri, mode=mode, src=text)
    lines = _strip_comments(text)

    i = 0
    # Package clause: first non-blank line.
    while i < len(lines) and not lines[i].strip():
        i += 1
    if i < len(lines) and (m := _PACKAGE_RE.match(lines[i].strip())):
        pgf.package_name = m.group(1)
        pgf.package_line = i + 1
        i += 1
    else:
        pgf.parse_errors.append(ParseError(line=i + 1, message="expected 'package' clause"))
        return pgf

    # Imports must precede all other declarations.
    while i < len(lines):
        stripped = lines[i].strip()
        if not stripped:
            i += 1
            continue
        if _IMPORT_GROUP_START_RE.match(stripped):
            i += 1
            while i < len(lines) and lines[i].strip() != ")":
                spec = lines[i].strip()
                if spec:
                    m = _IMPORT_SPEC_RE.match(spec)
                    if m:
                        pgf.imports.append(ImportSpec(path=m.group(2), name=m.group(1), line=i + 1))
                    else:
                        pgf.parse_errors.append(ParseError(line=i + 1, message=f"malformed import spec: {spec}"))
                i += 1
            if i >= len(lines):
                pgf.parse_errors.append(ParseError(line=i, message="unterminated import block"))
                return pgf
            i += 1
            continue
        m = _IMPORT_SINGLE_RE.match(stripped)
        if m:
            pgf.imports.append(ImportSpec(path=m.group(2), name=m.group(1), line=i + 1))
            i += 1
            continue
        break

    if mode is ParseMode.HEADER:
        return pgf

    block_kind = None
    for lineno in range(i, len(lines)):
        line = lines[lineno]
        if block_kind is not None:
            stripped = line.strip()
            if stripped == ")":
                block_kind = None
            elif line[:1] in ("\t", " ") and (m := _BLOCK_SPEC_RE.match(stripped)):
                pgf.decls.append(Decl(kind=block_kind, name=m.group(1), line=lineno + 1))
            continue
        # Only column-zero lines start top-level declarations.
        if not line or line[0] in ("\t", " ", "}", ")"):
            continue
        if m := _METHOD_RE.match(line):
            pgf.decls.append(Decl(kind="method", name=m.group(2), line=lineno + 1, receiver=m.group(1)))
        elif m := _FUNC_RE.match(line):
            pgf.decls.append(Decl(kind="func", name=m.group(1), line=lineno + 1))
        elif m := _BLOCK_DECL_RE.match(line):
            block_kind = m.group(1)
        elif m := _SPEC_DECL_RE.match(line):
            pgf.decls.append(Decl(kind=m.group(1), name=m.group(2), line=lineno + 1))
        elif line.startswith("import"):
            pgf.parse_errors.append(ParseError(line=lineno + 1, message="imports must appear before other declarations"))

    return pgf
