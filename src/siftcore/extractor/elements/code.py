"""
Code block rules: language detection and canonical ``<pre><code>`` output.
"""

from __future__ import annotations

import logging
import re
from typing import List, Optional

from bs4 import BeautifulSoup, NavigableString, Tag

logger = logging.getLogger(__name__)

KNOWN_LANGUAGES = frozenset(
    {
        "abap", "actionscript", "ada", "apache", "applescript", "arduino", "asm", "awk", "bash", "basic",
        "bat", "c", "c#", "c++", "clojure", "cmake", "cobol", "coffeescript", "cpp", "crystal", "csharp",
        "css", "csv", "cuda", "d", "dart", "diff", "django", "docker", "dockerfile", "elixir", "elm",
        "erb", "erlang", "f#", "fish", "fortran", "fsharp", "gherkin", "glsl", "go", "golang", "gradle",
        "graphql", "groovy", "haml", "handlebars", "haskell", "hcl", "html", "http", "ini", "java",
        "javascript", "jinja", "js", "json", "json5", "jsx", "julia", "kotlin", "latex", "less", "lisp",
        "lua", "makefile", "markdown", "matlab", "md", "mermaid", "nginx", "nim", "nix", "objc",
        "objectivec", "ocaml", "pascal", "perl", "php", "plaintext", "powershell", "prolog", "protobuf",
        "ps1", "py", "python", "r", "racket", "rb", "regex", "ruby", "rust", "sass", "scala", "scheme",
        "scss", "sh", "shell", "smalltalk", "solidity", "sql", "svelte", "swift", "tcl", "terraform",
        "tex", "toml", "ts", "tsx", "typescript", "vb", "vbnet", "verilog", "vhdl", "vim", "vue",
        "wasm", "xml", "yaml", "yml", "zig", "zsh",
    }
)

_CLASS_PREFIXES = [
    re.compile(r"^language-(.+)$"),
    re.compile(r"^lang-(.+)$"),
    re.compile(r"^highlight-source-(.+)$"),
    re.compile(r"^highlight-(.+)$"),
    re.compile(r"^syntax-(.+)$"),
    re.compile(r"^code-(.+)$"),
]
_BRUSH = re.compile(r"brush:\s*([\w#+-]+)", re.I)
_LANGUAGE_ATTRIBUTES = ("data-lang", "data-language", "language")

_GUTTER_SELECTOR = (
    '[class*="gutter"], [class*="line-number"], [class*="linenumber"], [class*="lineno"], '
    '[class*="line-num"], td.linenos, [aria-hidden="true"]'
)
_HIGHLIGHTER_SELECTOR = (
    'div[class*="syntaxhighlighter"], div[class*="code-block"], div[class*="codeblock"], '
    'div[class*="code-snippet"], div[data-lang], div[data-language]'
)
_LINE_SELECTOR = '[class~="line"], [class*="code-line"], [class*="codeline"], [data-line-number]'
_GUTTER_CLASS = re.compile(r"gutter|linenos|line-numbers")


def _clean_language(value: str) -> Optional[str]:
    value = value.strip().strip(";").lower()
    if not value or value in ("none", "nohighlight", "plain"):
        return None
    return value


def _language_from_element(element: Tag) -> Optional[str]:
    for attribute in _LANGUAGE_ATTRIBUTES:
        value = element.get(attribute)
        if value:
            language = _clean_language(str(value))
            if language:
                return language

    classes = element.get("class") or []
    if isinstance(classes, str):
        classes = classes.split()

    brush = _BRUSH.search(" ".join(classes))
    if brush:
        return _clean_language(brush.group(1))

    for token in classes:
        for prefix in _CLASS_PREFIXES:
            match = prefix.match(token)
            if match:
                candidate = _clean_language(match.group(1))
                if candidate and (prefix.pattern.startswith("^lang") or candidate in KNOWN_LANGUAGES):
                    return candidate
    for token in classes:
        if token.lower() in KNOWN_LANGUAGES:
            return token.lower()
    return None


def detect_language(block: Tag) -> Optional[str]:
    """Find a language hint on the block, its inner code, or a close ancestor."""
    code = block.find("code")
    candidates: List[Tag] = [c for c in (code, block) if c is not None]
    for ancestor in list(block.parents)[:3]:
        if isinstance(ancestor, Tag) and not isinstance(ancestor, BeautifulSoup):
            candidates.append(ancestor)
    for element in candidates:
        language = _language_from_element(element)
        if language:
            return language
    return None


def _text_with_breaks(element: Tag) -> str:
    parts: List[str] = []
    for node in element.descendants:
        if isinstance(node, NavigableString):
            parts.append(str(node))
        elif node.name == "br":
            parts.append("\n")
    return "".join(parts)


def extract_code_text(block: Tag) -> str:
    """Plain text of a code block with gutters dropped and line fragments joined."""
    for gutter in block.select(_GUTTER_SELECTOR):
        gutter.decompose()

    lines = [line for line in block.select(_LINE_SELECTOR) if line.find_parent(_is_line_like) is None]
    if lines:
        text = "\n".join(_text_with_breaks(line).rstrip("\n") for line in lines)
    else:
        code = block.find("code")
        text = _text_with_breaks(code if code is not None and block.name == "pre" else block)
    return text.strip("\n")


def _is_line_like(tag: Tag) -> bool:
    classes = tag.get("class") or []
    return "line" in classes or any("code-line" in c or "codeline" in c for c in classes)


def _new_tag(element: Tag, name: str) -> Tag:
    soup = element
    while soup.parent is not None:
        soup = soup.parent
    if isinstance(soup, BeautifulSoup):
        return soup.new_tag(name)
    return BeautifulSoup("", "html.parser").new_tag(name)


def build_code_block(block: Tag) -> Tag:
    """Replace ``block`` with a canonical ``<pre><code>`` pair and return the new ``pre``."""
    language = detect_language(block)
    text = extract_code_text(block)

    pre = _new_tag(block, "pre")
    code = _new_tag(block, "code")
    if language:
        code["data-lang"] = language
        code["class"] = [f"language-{language}"]
    code.string = text
    pre.append(code)

    if block.parent is not None:
        block.replace_with(pre)
    return pre


def standardize_code_blocks(root: Tag) -> int:
    """Canonicalize every code block under ``root``. Returns the number rewritten."""
    rewritten = 0
    highlighters = [
        div
        for div in root.select(_HIGHLIGHTER_SELECTOR)
        if div.find("pre") is None and div.select_one(_LINE_SELECTOR) is not None
    ]
    built = set()
    for div in highlighters:
        if div.parent is None or any(parent is h for parent in div.parents for h in highlighters):
            continue
        built.add(id(build_code_block(div)))
        rewritten += 1

    for pre in root.find_all("pre"):
        if pre.parent is None or id(pre) in built:
            continue
        if pre.find_parent(class_=_GUTTER_CLASS) is not None:
            pre.decompose()
            continue
        build_code_block(pre)
        rewritten += 1

    if rewritten:
        logger.debug("Standardized %d code blocks", rewritten)
    return rewritten
