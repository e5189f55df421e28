"""
Tests for CatalogBuilder.

Run with: pytest tests/test_builder.py -v
"""

import ast
import inspect
import json
import types

import pytest

from funccatalog import sample_functions
from funccatalog.catalog import source as source_module
from funccatalog.catalog.builder import (
    CatalogBuilder,
    format_annotation,
    literal_default,
    load_module_from_file,
    user_functions,
)
from funccatalog.config import CatalogSettings
from funccatalog.errors import SourceUnavailableError

ADD_SOURCE = "def add(a: int, b: int) -> int:\n    return a + b"
MULTIPLY_SOURCE = "def multiply(a: int, b: int) -> int:\n    return a * b"

MIXED_MODULE = '''\
import os
from os.path import join


def passthrough(func):
    return func


def add(a: int, b: int = 2) -> int:
    return a + b


@passthrough
def multiply(a: int,
             b: int) -> int:
    # product of both
    return a * b


def greet(name: str = "world", *args, flag: bool = False, **kwargs) -> str:
    return f"hello {name}"


def untyped(x, y=None, pair=(1, "two"), options={"depth": 3}):
    return x


def with_object_default(marker=object()):
    return marker


async def fetch(url: str) -> bytes:
    return b""
'''


@pytest.fixture
def mixed_module(tmp_path):
    path = tmp_path / "mixed.py"
    path.write_text(MIXED_MODULE, encoding="utf-8")
    return load_module_from_file(path)


def build(module, **settings):
    return CatalogBuilder(CatalogSettings(**settings)).build(module)


class TestSampleCatalog:
    """The default catalog of add and multiply."""

    @pytest.fixture
    def records(self):
        return CatalogBuilder().build()

    def test_two_records_in_definition_order(self, records):
        assert [r.name for r in records] == ["add", "multiply"]

    def test_return_types(self, records):
        assert all(r.return_type == "int" for r in records)

    def test_params(self, records):
        for record in records:
            assert [p.name for p in record.params] == ["a", "b"]
            assert all(p.type == "int" for p in record.params)
            assert all(p.default is None for p in record.params)

    def test_sources_are_exact_definitions(self, records):
        assert [r.source for r in records] == [ADD_SOURCE, MULTIPLY_SOURCE]

    def test_json_shape(self, records):
        builder = CatalogBuilder()
        payload = json.loads(builder.to_json(records))

        assert len(payload) == 2
        assert list(payload[0]) == ["name", "type", "params", "source"]
        assert payload[0]["type"] == "int"
        assert payload[0]["params"][0] == {"name": "a", "type": "int", "default": None}
        assert payload[1]["source"] == MULTIPLY_SOURCE

    def test_json_is_indented(self, records):
        text = CatalogBuilder(CatalogSettings(indent=4)).to_json(records)
        assert text.startswith("[\n    {\n        \"name\": \"add\"")

    def test_param_prefix(self):
        records = CatalogBuilder(CatalogSettings(param_prefix="$")).build()
        assert [p.name for p in records[0].params] == ["$a", "$b"]

    def test_declaration_offset_includes_previous_line(self):
        records = CatalogBuilder(CatalogSettings(declaration_offset=1)).build()
        assert records[0].source == "\n" + ADD_SOURCE


class TestAllowList:
    """Allow-list filtering is an intersection with the defined functions."""

    def test_unlisted_functions_are_skipped(self, mixed_module):
        records = build(mixed_module, allow_list=["add"])
        assert [r.name for r in records] == ["add"]

    def test_listed_but_undefined_names_are_ignored(self, mixed_module):
        records = build(mixed_module, allow_list=["add", "subtract", "divide"])
        assert [r.name for r in records] == ["add"]

    def test_order_follows_definitions_not_allow_list(self, mixed_module):
        records = build(mixed_module, allow_list=["greet", "multiply", "add"])
        assert [r.name for r in records] == ["add", "multiply", "greet"]

    def test_imported_functions_are_not_user_functions(self, mixed_module):
        names = [f.__name__ for f in user_functions(mixed_module)]
        assert "join" not in names
        assert names[:3] == ["passthrough", "add", "multiply"]

    def test_imported_name_on_allow_list_produces_nothing(self, mixed_module):
        assert build(mixed_module, allow_list=["join"]) == []

    def test_empty_allow_list(self, mixed_module):
        assert build(mixed_module, allow_list=[]) == []

    def test_aliased_function_is_cataloged_once(self, tmp_path):
        path = tmp_path / "aliased.py"
        path.write_text(
            "def add(a: int, b: int) -> int:\n"
            "    return a + b\n"
            "\n"
            "\n"
            "plus = add\n",
            encoding="utf-8",
        )
        module = load_module_from_file(path)

        assert [f.__name__ for f in user_functions(module)] == ["add"]
        assert [r.name for r in build(module, allow_list=["add", "plus"])] == ["add"]


class TestReflection:
    """Parameters, types, defaults and sources of individual functions."""

    @pytest.fixture
    def records(self, mixed_module):
        names = ["add", "multiply", "greet", "untyped", "with_object_default", "fetch"]
        return {r.name: r for r in build(mixed_module, allow_list=names)}

    def test_declared_default_is_literal_value(self, records):
        a, b = records["add"].params
        assert a.default is None
        assert b.default == 2

    def test_string_and_bool_defaults(self, records):
        params = {p.name: p for p in records["greet"].params}
        assert params["name"].default == "world"
        assert params["flag"].default is False
        assert params["flag"].type == "bool"

    def test_variadic_markers(self, records):
        assert [p.name for p in records["greet"].params] == ["name", "*args", "flag", "**kwargs"]

    def test_untyped_params_and_return(self, records):
        record = records["untyped"]
        assert record.return_type == ""
        assert all(p.type == "" for p in record.params)

    def test_container_defaults(self, records):
        params = {p.name: p for p in records["untyped"].params}
        assert params["pair"].default == [1, "two"]
        assert params["options"].default == {"depth": 3}

    def test_non_literal_default_uses_repr(self, records):
        (marker,) = records["with_object_default"].params
        assert isinstance(marker.default, str)
        assert marker.default.startswith("<object object at")

    def test_decorated_multiline_source(self, records):
        assert records["multiply"].source == (
            "def multiply(a: int,\n"
            "             b: int) -> int:\n"
            "    # product of both\n"
            "    return a * b"
        )

    def test_decorator_line_with_declaration_offset(self, mixed_module):
        (record,) = build(mixed_module, allow_list=["multiply"], declaration_offset=1)
        assert record.source.startswith("@passthrough\ndef multiply(")

    def test_async_function(self, records):
        record = records["fetch"]
        assert record.return_type == "bytes"
        assert record.source.startswith("async def fetch(url: str) -> bytes:")

    def test_source_round_trips(self, records, mixed_module):
        for name, record in records.items():
            node = ast.parse(record.source).body[0]
            original = inspect.signature(getattr(mixed_module, name))

            assert node.name == name
            all_args = node.args.posonlyargs + node.args.args + node.args.kwonlyargs
            all_args += [a for a in (node.args.vararg, node.args.kwarg) if a is not None]
            assert len(all_args) == len(original.parameters)

            annotations = {a.arg: ast.unparse(a.annotation) for a in all_args if a.annotation}
            expected = {
                p.name: format_annotation(p.annotation)
                for p in original.parameters.values()
                if p.annotation is not inspect.Parameter.empty
            }
            assert annotations == expected


class TestSourceFiles:
    """Decorated wrappers, encodings and file reads."""

    def test_wraps_decorated_function(self, tmp_path):
        path = tmp_path / "wrapped.py"
        path.write_text(
            "import functools\n"
            "\n"
            "\n"
            "def logged(func):\n"
            "    @functools.wraps(func)\n"
            "    def wrapper(*args, **kwargs):\n"
            "        return func(*args, **kwargs)\n"
            "    return wrapper\n"
            "\n"
            "\n"
            "@logged\n"
            "def add(a: int, b: int = 1) -> int:\n"
            "    return a + b\n",
            encoding="utf-8",
        )
        (record,) = build(load_module_from_file(path), allow_list=["add"])

        assert record.source == "def add(a: int, b: int = 1) -> int:\n    return a + b"
        assert record.return_type == "int"
        assert [(p.name, p.default) for p in record.params] == [("a", None), ("b", 1)]

    def test_latin1_module(self, tmp_path):
        path = tmp_path / "latin.py"
        path.write_bytes(
            "# -*- coding: latin-1 -*-\n"
            "# café\n"
            "\n"
            "\n"
            "def add(a: int, b: int) -> int:\n"
            "    return a + b  # somme\u00e9\n".encode("latin-1")
        )
        (record,) = build(load_module_from_file(path), allow_list=["add"])

        assert record.source == "def add(a: int, b: int) -> int:\n    return a + b  # somme\u00e9"

    def test_one_read_per_function(self, monkeypatch):
        calls = []
        original_read_lines = source_module.read_lines

        def counting_read_lines(file):
            calls.append(file)
            return original_read_lines(file)

        monkeypatch.setattr(source_module, "read_lines", counting_read_lines)
        records = CatalogBuilder().build()

        assert len(calls) == len(records) == 2


class TestPostponedAnnotations:
    """Modules using ``from __future__ import annotations``."""

    def test_string_annotations_are_verbatim(self, tmp_path):
        path = tmp_path / "postponed.py"
        path.write_text(
            "from __future__ import annotations\n"
            "\n"
            "\n"
            "def add(values: list[int], start: Optional[int] = 0) -> dict[str, int]:\n"
            "    return {}\n",
            encoding="utf-8",
        )
        (record,) = build(load_module_from_file(path), allow_list=["add"])

        assert record.return_type == "dict[str, int]"
        assert [p.type for p in record.params] == ["list[int]", "Optional[int]"]
        assert record.params[1].default == 0


class TestFailures:
    """Failures abort the whole build."""

    def test_unreadable_file_raises_os_error(self, tmp_path):
        path = tmp_path / "vanishing.py"
        path.write_text("def add(a, b):\n    return a + b\n", encoding="utf-8")
        module = load_module_from_file(path)
        path.unlink()

        with pytest.raises(OSError):
            build(module, allow_list=["add"])

    def test_function_without_source_file(self):
        module = types.ModuleType("dynamic_catalog")
        code = compile("def add(a, b):\n    return a + b\n", "<dynamic-catalog>", "exec")
        exec(code, module.__dict__)

        with pytest.raises(SourceUnavailableError):
            build(module, allow_list=["add"])

    def test_missing_module_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            load_module_from_file(tmp_path / "nope.py")


class TestHelpers:
    """Test cases for annotation and default formatting."""

    @pytest.mark.parametrize("annotation,expected", [
        (inspect.Parameter.empty, ""),
        (int, "int"),
        ("list[str]", "list[str]"),
        (None, "None"),
    ])
    def test_format_annotation(self, annotation, expected):
        assert format_annotation(annotation) == expected

    @pytest.mark.parametrize("value,expected", [
        (None, None),
        (3, 3),
        (1.5, 1.5),
        ("x", "x"),
        (True, True),
        ((1, (2, 3)), [1, [2, 3]]),
    ])
    def test_literal_default(self, value, expected):
        assert literal_default(value) == expected

    @pytest.mark.parametrize("value", [float("inf"), float("-inf"), float("nan")])
    def test_non_finite_float_uses_repr(self, value):
        assert literal_default(value) == repr(value)

    def test_non_finite_float_in_container_uses_repr(self):
        assert literal_default((1.0, float("inf"))) == "(1.0, inf)"

    def test_non_literal_default(self):
        assert literal_default(sample_functions) == repr(sample_functions)
