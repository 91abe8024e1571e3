"""Tests for dtsbundle.resolver."""

from __future__ import annotations

from dtsbundle.resolver import ImportResolver, split_lines
from tests._fixtures.tree_builder import DeclarationTreeBuilder


def _resolver(tree: DeclarationTreeBuilder, *known: str) -> ImportResolver:
    return ImportResolver(tree.namer(), known)


def test_resolve_rewrites_sibling_import(tree: DeclarationTreeBuilder) -> None:
    resolver = _resolver(tree, "demo/src/a", "demo/src/b")

    result = resolver.resolve("import { B } from './b';\n", "demo/src/a")

    assert result == "import { B } from 'demo/src/b';\n"


def test_resolve_appends_index_for_directories(tree: DeclarationTreeBuilder) -> None:
    resolver = _resolver(tree, "demo/a", "demo/sub/index")

    result = resolver.resolve('export * from "./sub";', "demo/a")

    assert result == 'export * from "demo/sub/index";'


def test_resolve_keeps_dangling_index_guess(tree: DeclarationTreeBuilder) -> None:
    resolver = _resolver(tree, "demo/a")

    result = resolver.resolve("import { X } from './nowhere';", "demo/a")

    assert result == "import { X } from 'demo/nowhere/index';"


def test_resolve_handles_parent_directory_and_dynamic_imports(tree: DeclarationTreeBuilder) -> None:
    resolver = _resolver(tree, "demo/src/c/d", "demo/src/interfaces")

    source = "export declare function f(): import('../interfaces').ISuggestedText;"
    result = resolver.resolve(source, "demo/src/c/d")

    assert result == "export declare function f(): import('demo/src/interfaces').ISuggestedText;"


def test_resolve_leaves_third_party_modules_alone(tree: DeclarationTreeBuilder) -> None:
    resolver = _resolver(tree, "demo/a")
    source = "import * as winston from 'winston';\nexport declare class A {\n}"

    assert resolver.resolve(source, "demo/a") == source


def test_resolve_without_relative_imports_only_normalises_line_endings(
    tree: DeclarationTreeBuilder,
) -> None:
    resolver = _resolver(tree, "demo/a")

    result = resolver.resolve("export class A {\r\n}\rexport type T = string;\n\r", "demo/a")

    assert result == "export class A {\n}\nexport type T = string;\n"


def test_resolve_line_with_static_and_dynamic_imports(tree: DeclarationTreeBuilder) -> None:
    resolver = _resolver(tree, "demo/a", "demo/b", "demo/c")

    result = resolver.resolve(
        "export { X } from './b'; type Y = import('./c').Y;", "demo/a"
    )

    assert result == "export { X } from 'demo/b'; type Y = import('demo/c').Y;"


def test_split_lines_normalises_all_line_endings() -> None:
    assert split_lines("a\r\nb\rc\n\rd") == ["a", "b", "c", "d"]
