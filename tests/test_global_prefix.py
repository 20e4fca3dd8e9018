"""Unit tests for the global-prefix rule."""

from westwood.context import FileContext
from westwood.parser import create_parser, parse_bytes
from westwood.rules.global_prefix import GlobalPrefixRule
from westwood.source_index import SourceIndex


def _run_rule(source: bytes) -> list:
    tree = parse_bytes(source, parser=create_parser())
    ctx = FileContext(path="test.c", source=source, tree=tree, index=SourceIndex.build(source))
    return GlobalPrefixRule().run(ctx)


def test_prefixed_global_passes():
    assert _run_rule(b"int g_counter = 0;\n") == []


def test_unprefixed_global():
    violations = _run_rule(b"int counter = 0;\nchar *name;\n")
    assert [v.message for v in violations] == [
        'Global variable "counter" must be prefixed with "g_"',
        'Global variable "name" must be prefixed with "g_"',
    ]


def test_locals_prototypes_and_parameters_are_ignored():
    source = b"int add(int left, int right);\n\nint main(void)\n{\n    int total = 0;\n    return total;\n}\n"
    assert _run_rule(source) == []
