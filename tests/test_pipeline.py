from __future__ import annotations

import pathlib
from typing import Any

import pytest
from helpers import intrinsic, method, node, project

from refdoc import exceptions, pipeline, yaml_config
from refdoc.config import models


def test_convert_scenario(scenario: dict[str, Any], config: models.ConverterConfig) -> None:
    result = pipeline.convert(scenario, config)

    assert result.package == "pkg"
    assert [d.filename for d in result.documents] == ["N", "N.A", "N.B"]
    assert result.index["items"][0]["children"] == ["pkg.N", "pkg.N.A", "pkg.N.B"]
    assert [r["name"] for r in result.index["references"]] == ["N", "A", "B"]
    assert result.collisions == {}

    a = result.documents[1]
    assert a.items[1]["syntax"]["return"]["type"] == ["<xref:pkg.N.B>"]
    assert {"uid": "pkg.N.B", "name": "B", "status": "resolved"} in a.references


def test_namespace_lists_flattened_containers(
    scenario: dict[str, Any], config: models.ConverterConfig
) -> None:
    result = pipeline.convert(scenario, config)

    assert result.documents[0].primary["children"] == ["pkg.N.A", "pkg.N.B"]


def test_toc_follows_nesting(scenario: dict[str, Any], config: models.ConverterConfig) -> None:
    result = pipeline.convert(scenario, config)

    package = result.toc[0]
    assert package["href"] == "index.yml"
    namespace = package["items"][0]
    assert namespace["href"] == "N.yml"
    assert [i["href"] for i in namespace["items"]] == ["N.A.yml", "N.B.yml"]


def test_same_name_at_different_paths() -> None:
    model = project(
        "pkg",
        node("X", "Namespace", 1, node("C", "Class", 2)),
        node("Y", "Namespace", 3, node("C", "Class", 4)),
    )

    result = pipeline.convert(model, models.ConverterConfig())

    assert [d.filename for d in result.documents] == ["X", "X.C", "Y", "Y.C"]
    assert result.collisions == {}


def test_separator_collision_is_renamed() -> None:
    model = project(
        "pkg",
        node('"a/b"', "External module", 1, node("X", "Class", 2)),
        node("a", "Namespace", 3, node("b", "Namespace", 4, node("X", "Class", 5))),
    )

    result = pipeline.convert(model, models.ConverterConfig(group_by_module=True))

    assert [(d.uid, d.filename) for d in result.documents] == [
        ("pkg.a/b", "a.b"),
        ("pkg.a/b.X", "a.b.X"),
        ("pkg.a", "a"),
        ("pkg.a.b", "a.b-namespace"),
        ("pkg.a.b.X", "a.b.X-class"),
    ]
    assert result.collisions == {"a.b": ["pkg.a/b", "pkg.a.b"], "a.b.x": ["pkg.a/b.X", "pkg.a.b.X"]}
    assert len({d.filename.lower() for d in result.documents}) == len(result.documents)


def test_toc_disabled_ordering(config: models.ConverterConfig) -> None:
    model = project("pkg", node("Zed", "Class", 1), node("Alpha", "Class", 2))

    sorted_toc = pipeline.convert(model, config).toc[0]["items"]
    kept_toc = pipeline.convert(model, models.ConverterConfig(alphabetical_order=False)).toc[0]["items"]

    assert [i["name"] for i in sorted_toc] == ["Alpha", "Zed"]
    assert [i["name"] for i in kept_toc] == ["Zed", "Alpha"]


@pytest.mark.parametrize(
    "model",
    [
        pytest.param(project("pkg"), id="no_children"),
        pytest.param(project("pkg", node("lit", "Type literal", 1)), id="nothing_documented"),
        pytest.param(
            project("pkg", method("f", 1, intrinsic("void"), kind="Function")),
            id="only_top_level_functions",
        ),
    ],
)
def test_nothing_to_write(model: dict[str, Any], config: models.ConverterConfig) -> None:
    with pytest.raises(exceptions.NoSymbolsError):
        pipeline.convert(model, config)


def test_load_model_missing_file(tmp_path: pathlib.Path) -> None:
    with pytest.raises(exceptions.InputNotFoundError, match="doesn't exist"):
        pipeline.load_model(tmp_path / "missing.json")


def test_load_model_invalid_json(tmp_path: pathlib.Path) -> None:
    path = tmp_path / "api.json"
    path.write_text("{not json")

    with pytest.raises(exceptions.MalformedInputError, match="not valid JSON"):
        pipeline.load_model(path)


def test_run_writes_all_files(
    scenario: dict[str, Any], config: models.ConverterConfig, write_model, tmp_path: pathlib.Path
) -> None:
    output = tmp_path / "out"

    result = pipeline.run(write_model(scenario), output, config)

    assert sorted(p.name for p in output.iterdir()) == [
        "N.A.yml",
        "N.B.yml",
        "N.yml",
        "index.yml",
        "toc.yml",
    ]
    a_text = (output / "N.A.yml").read_text()
    assert a_text.startswith("### YamlMime:UniversalReference\n")
    assert yaml_config.load(a_text) == result.documents[1].to_dict()
    assert (output / "index.yml").read_text().startswith("### YamlMime:UniversalReference\n")
    assert not (output / "toc.yml").read_text().startswith("###")
    assert yaml_config.load((output / "toc.yml").read_text()) == result.toc


def test_run_with_no_symbols_writes_nothing(
    config: models.ConverterConfig, write_model, tmp_path: pathlib.Path
) -> None:
    output = tmp_path / "out"

    with pytest.raises(exceptions.NoSymbolsError):
        pipeline.run(write_model(project("pkg")), output, config)

    assert not output.exists()


def test_run_with_malformed_model_writes_nothing(
    config: models.ConverterConfig, write_model, tmp_path: pathlib.Path
) -> None:
    output = tmp_path / "out"

    with pytest.raises(exceptions.MalformedInputError):
        pipeline.run(write_model({"name": "pkg", "children": "oops"}), output, config)

    assert not output.exists()


def test_merged_declarations_get_separate_documents(config: models.ConverterConfig) -> None:
    model = project(
        "pkg",
        node("Foo", "Class", 1, method("run", 2, intrinsic("void"))),
        node("Foo", "Namespace", 3, node("Bar", "Class", 4)),
    )

    result = pipeline.convert(model, config)

    assert [(d.uid, d.filename) for d in result.documents] == [
        ("pkg.Foo", "Foo"),
        ("pkg.Foo-namespace", "Foo-namespace"),
        ("pkg.Foo-namespace.Bar", "Foo-namespace.Bar"),
    ]
    assert result.documents[1].primary["name"] == "Foo"
    assert result.documents[1].primary["children"] == ["pkg.Foo-namespace.Bar"]
    assert result.collisions == {}


def test_same_export_from_two_files(config: models.ConverterConfig) -> None:
    model = project(
        "pkg",
        node('"a"', "External module", 1, node("Foo", "Class", 2)),
        node('"b"', "External module", 3, node("Foo", "Class", 4)),
    )

    result = pipeline.convert(model, config)

    assert [d.filename for d in result.documents] == ["Foo", "b.Foo"]
    assert result.index["items"][0]["children"] == ["pkg.Foo", "pkg.b.Foo"]


def test_reserved_filenames_are_renamed(config: models.ConverterConfig) -> None:
    model = project("pkg", node("index", "Class", 1), node("Toc", "Interface", 2))

    result = pipeline.convert(model, config)

    assert [d.filename for d in result.documents] == ["index-class", "Toc-interface"]
    assert sorted(i["href"] for i in result.toc[0]["items"]) == [
        "Toc-interface.yml",
        "index-class.yml",
    ]
    assert result.collisions == {"index": ["index.yml", "pkg.index"], "toc": ["toc.yml", "pkg.Toc"]}


def test_run_keeps_package_index_beside_reserved_names(
    config: models.ConverterConfig, write_model, tmp_path: pathlib.Path
) -> None:
    model = project("pkg", node("index", "Class", 1), node("toc", "Namespace", 2))
    output = tmp_path / "out"

    pipeline.run(write_model(model), output, config)

    assert sorted(p.name for p in output.iterdir()) == [
        "index-class.yml",
        "index.yml",
        "toc-namespace.yml",
        "toc.yml",
    ]
    index = yaml_config.load((output / "index.yml").read_text())
    assert index["items"][0]["type"] == "package"
    toc = yaml_config.load((output / "toc.yml").read_text())
    assert toc[0]["href"] == "index.yml"
