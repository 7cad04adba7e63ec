import pytest

from fedcat.cli.common.filter_builder import build_filter, build_filters, parse_properties
from fedcat.core.unstructured.columns import MetaData
from fedcat.core.unstructured.filters import (
    EqualTo,
    GreaterThan,
    LessThanOrEqual,
    Not,
    StringContains,
    evaluate,
)


def test_build_filter_parses_operators_and_numeric_values():
    flt = build_filter("sizeinbytes > 1000")

    assert isinstance(flt, GreaterThan)
    assert flt.attribute == "sizeinbytes"
    assert flt.value == 1000


@pytest.mark.parametrize(
    "expr,cls",
    [
        ("type=pdf", EqualTo),
        ("type!=pdf", Not),
        ("modifiedat<=5", LessThanOrEqual),
        ("subdir~2024", StringContains),
    ],
)
def test_build_filter_operator_mapping(expr, cls):
    assert isinstance(build_filter(expr), cls)


def test_build_filters_combine_with_and():
    filters = build_filters(["type=pdf", "sizeinbytes>1000"])

    assert evaluate(filters, MetaData(file_type="pdf", size_in_bytes=2000))
    assert not evaluate(filters, MetaData(file_type="pdf", size_in_bytes=500))


@pytest.mark.parametrize(
    "expr,match",
    [
        ("sizeinbytes", "Invalid filter"),
        ("sizeinbytes>big", "needs an integer"),
        ("owner=me", "Unknown column"),
    ],
)
def test_build_filter_rejects_bad_expressions(expr, match):
    with pytest.raises(ValueError, match=match):
        build_filter(expr)


def test_parse_properties():
    assert parse_properties(["path=/tmp/a=b", "format=text"]) == {
        "path": "/tmp/a=b",
        "format": "text",
    }
    with pytest.raises(ValueError, match="expected key=value"):
        parse_properties(["path"])
    with pytest.raises(ValueError, match="empty key"):
        parse_properties(["=x"])
