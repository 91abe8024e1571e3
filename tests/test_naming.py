"""Tests for dtsbundle.naming."""

from __future__ import annotations

from dtsbundle.models import BasePolicy
from tests._fixtures.tree_builder import DeclarationTreeBuilder


def test_name_strips_declaration_extension(tree: DeclarationTreeBuilder) -> None:
    tree.write({"a.d.ts": "export declare const a: number;\n"})

    assert tree.namer().name(tree.scratch / "a.d.ts") == "demo/a"


def test_names_are_distinct_for_file_and_directory_index(tree: DeclarationTreeBuilder) -> None:
    tree.write(
        {
            "a.d.ts": "export {};\n",
            "b/index.d.ts": "export {};\n",
            "b.d.ts": "export {};\n",
        }
    )
    namer = tree.namer()

    names = {
        namer.name(tree.scratch / "a.d.ts"),
        namer.name(tree.scratch / "b" / "index.d.ts"),
        namer.name(tree.scratch / "b.d.ts"),
    }

    assert names == {"demo/a", "demo/b/index", "demo/b"}


def test_name_keeps_dots_inside_module_name(tree: DeclarationTreeBuilder) -> None:
    tree.write({"a.schema.d.ts": "export interface ASchema {}\n"})

    assert tree.namer().name(tree.scratch / "a.schema.d.ts") == "demo/a.schema"


def test_name_leaves_directories_untouched(tree: DeclarationTreeBuilder) -> None:
    tree.write({"lib.v2/index.d.ts": "export {};\n"})

    assert tree.namer().name(tree.scratch / "lib.v2") == "demo/lib.v2"


def test_name_without_existence_check_strips_synthetic_path(tree: DeclarationTreeBuilder) -> None:
    namer = tree.namer()

    main = namer.name(tree.root / "src" / "index.ts", base=BasePolicy.ROOT, no_existence_check=True)

    assert main == "demo/src/index"


def test_name_strips_only_when_file_exists(tree: DeclarationTreeBuilder) -> None:
    namer = tree.namer()

    assert namer.name(tree.scratch / "missing.d.ts") == "demo/missing.d.ts"


def test_name_honours_prefix_and_extension_flags(tree: DeclarationTreeBuilder) -> None:
    tree.write({"c.d.ts": "export {};\n"})
    namer = tree.namer()

    assert namer.name(tree.scratch / "c.d.ts", no_prefix=True) == "c"
    assert namer.name(tree.scratch / "c.d.ts", no_extension_removal=True) == "demo/c.d.ts"


def test_name_normalises_backslashes(tree: DeclarationTreeBuilder) -> None:
    namer = tree.namer()

    name = namer.name(tree.root / "sub\\mod.ts", base=BasePolicy.ROOT, no_existence_check=True)

    assert name == "demo/sub/mod"


def test_name_relative_to_working_directory(tree: DeclarationTreeBuilder) -> None:
    namer = tree.namer()

    name = namer.name(
        tree.base / "demo" / "src" / ".." / "b",
        base=BasePolicy.CWD,
        no_prefix=True,
        no_extension_removal=True,
    )

    assert name == "demo/b"
