"""Unit tests for the define-placement rule."""

from westwood.context import FileContext
from westwood.parser import create_parser, parse_bytes
from westwood.rules.define_placement import DefinePlacementRule, group_adjacent
from westwood.source_index import SourceIndex


def _run_rule(source: bytes) -> list:
    tree = parse_bytes(source, parser=create_parser())
    ctx = FileContext(path="test.c", source=source, tree=tree, index=SourceIndex.build(source))
    return DefinePlacementRule().run(ctx)


def test_grouped_defines_at_top():
    source = b"#define MAX_SIZE (10)\n#define MIN_SIZE (1)\n\nint main(void)\n{\n    return 0;\n}\n"
    assert _run_rule(source) == []


def test_define_after_function():
    source = b"int main(void)\n{\n    return 0;\n}\n\n#define LATE (1)\n"
    violations = _run_rule(source)
    assert len(violations) == 1
    violation = violations[0]
    assert "before all functions" in violation.message
    assert source[violation.primary.start : violation.primary.end] == b"#define LATE (1)"
    assert violation.secondary[0].label == "first function defined here"


def test_scattered_top_level_defines():
    source = b"#define FIRST (1)\n\nint g_x;\n\n#define SECOND (2)\n"
    violations = _run_rule(source)
    assert len(violations) == 1
    violation = violations[0]
    assert violation.message == "All top-level #define statements must be grouped together"
    assert source[violation.primary.start : violation.primary.end] == b"#define SECOND (2)"
    first = violation.secondary[0].span
    assert source[first.start : first.end] == b"#define FIRST (1)"


def test_scattered_defines_inside_function():
    source = (
        b"int main(void)\n{\n#define ONE (1)\n    int g_a = ONE;\n#define TWO (2)\n    return g_a + TWO;\n}\n"
    )
    violations = _run_rule(source)
    messages = [v.message for v in violations]
    assert "All #define statements in each function must be grouped together" in messages
    in_function = [v for v in violations if v.notes == ("In function `main()'",)]
    assert len(in_function) == 1
    assert in_function[0].primary_label == "more #define statements found here"


def test_group_adjacent():
    source = b"#define A_A (1)\n#define B_B (2)\n\n#define C_C (3)\n"
    tree = parse_bytes(source)
    defines = [c for c in tree.root_node.children if c.type == "preproc_def"]
    groups = group_adjacent(defines)
    assert len(groups) == 2
    assert groups[0].start == 0
