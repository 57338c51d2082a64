"""yarn JSON Lines 输出解析单元测试"""

from __future__ import annotations

import json

from depscope.core.models import DependencyGraph, DependencyType
from depscope.package_manager.yarn import (
    YarnPackageManager,
    parse_outdated_lines,
    parse_tree_lines,
)


def _lines(*records) -> str:
    return "\n".join(r if isinstance(r, str) else json.dumps(r) for r in records)


OUTDATED = _lines(
    {"type": "info", "data": "Color legend"},
    "this line is not json",
    {"type": "table", "data": {
        "head": ["Package", "Current", "Wanted", "Latest", "Package Type", "URL"],
        "body": [
            ["react", "17.0.2", "17.0.2", "18.2.0", "dependencies", "https://reactjs.org"],
            ["eslint", "8.0.0", "8.57.0", "9.0.0", "devDependencies", "https://eslint.org"],
            ["short", "1.0.0"],
        ],
    }},
)


class TestOutdated:
    def test_table_rows(self) -> None:
        rows = parse_outdated_lines(OUTDATED)
        assert [r.name for r in rows] == ["react", "eslint"]
        assert rows[0].latest == "18.2.0"
        assert rows[1].wanted == "8.57.0"
        assert rows[1].dependency_type == DependencyType.DEV

    def test_type_column_from_head(self) -> None:
        output = _lines({"type": "table", "data": {
            "head": ["Package", "Current", "Wanted", "Latest", "Workspace", "Package Type", "URL"],
            "body": [["vite", "4.0.0", "4.5.0", "5.0.0", "web", "devDependencies", ""]],
        }})
        (row,) = parse_outdated_lines(output)
        assert row.dependency_type == DependencyType.DEV

    def test_via_adapter(self, fake_executor, tmp_path) -> None:
        fake_executor.add("yarn", ("outdated",), stdout=OUTDATED, returncode=1)
        assert len(YarnPackageManager(tmp_path).outdated()) == 2

    def test_malformed_table_record_skipped(self, fake_executor, tmp_path) -> None:
        output = _lines(
            {"type": "table", "data": {
                "head": ["Package", "Current", "Wanted", "Latest", "Package Type", "URL"],
                "body": [["lodash", "4.17.20", "4.17.21", "4.17.21", "dependencies", ""]],
            }},
            {"type": "table", "data": "garbage"},
            {"type": "table", "data": {"head": "not-a-list", "body": {"x": 1}}},
        )
        fake_executor.add("yarn", ("outdated",), stdout=output, returncode=1)
        rows = YarnPackageManager(tmp_path).outdated()
        assert [r.name for r in rows] == ["lodash"]

    def test_non_string_type_cell(self) -> None:
        output = _lines({"type": "table", "data": {
            "head": ["Package", "Current", "Wanted", "Latest", "Package Type", "URL"],
            "body": [
                ["lodash", "4.17.20", "4.17.21", "4.17.21", "dependencies", ""],
                ["odd", "1.0.0", "1.0.1", "2.0.0", 7, ""],
            ],
        }})
        rows = parse_outdated_lines(output)
        assert [r.name for r in rows] == ["lodash", "odd"]
        assert rows[1].dependency_type == DependencyType.DIRECT


class TestTree:
    def test_tree_record(self) -> None:
        output = _lines(
            {"type": "activityStart", "data": {}},
            {"type": "tree", "data": {"type": "list", "trees": [
                {"name": "express@4.18.2", "children": [
                    {"name": "debug@2.6.9", "children": []},
                ]},
                {"name": "@babel/core@7.23.0", "children": []},
            ]}},
        )
        graph = parse_tree_lines(output)
        assert (graph.name, graph.version) == ("root", "0.0.0")
        express, babel = graph.dependencies
        assert (express.name, express.version) == ("express", "4.18.2")
        assert express.dependencies[0].name == "debug"
        assert (babel.name, babel.version) == ("@babel/core", "7.23.0")

    def test_no_tree_record(self) -> None:
        assert parse_tree_lines(_lines({"type": "info", "data": "x"})) == DependencyGraph.empty()

    def test_tree_record_with_bad_data(self) -> None:
        graph = parse_tree_lines(_lines({"type": "tree", "data": ["x"]}))
        assert graph.dependencies == []

    def test_garbage_degrades(self, fake_executor, tmp_path) -> None:
        fake_executor.add("yarn", ("list",), stdout="error Something went wrong", returncode=1)
        assert YarnPackageManager(tmp_path).get_dependency_tree() == DependencyGraph.empty()
