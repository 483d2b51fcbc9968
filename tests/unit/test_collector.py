# Copyright 2026 Zsolt Kulcsar and Contributors. Licensed under the EUPL-1.2 or later
"""Unit tests for file collection."""

import hashlib
from pathlib import Path

import pytest

from license_expr import (
    NO_ASSERTION,
    DisjunctiveSet,
    LicenseRegistry,
    ParseError,
    SimpleLicenseRef,
    UnknownLicenseRefError,
)
from sfc.collector import CollectionResult, FileCollector, collect_config
from sfc.config import CollectorConfig, ExtractedLicenseSpec, FileInfo, FileSet, PathFileInfo, SnippetSpec
from sfc.errors import CollectionError, ConfigurationError
from sfc.ids import IdGenerator

FILE_WITH_ID_CONTENT = "/**\n  *SPDX-License-Identifier: MIT\n  *\n  *SPDX-License-Identifier: Apache-2.0\n**/"

MIT = SimpleLicenseRef("MIT")
APACHE = SimpleLicenseRef("Apache-2.0")


def _write_file(path: Path, content: str) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(content, encoding="utf-8")


def _collect(
    project_root: Path,
    file_sets: list[FileSet] | None = None,
    default_file_info: FileInfo | None = None,
    path_overrides: dict[str, FileInfo | PathFileInfo] | None = None,
    collector: FileCollector | None = None,
    checksum_algorithms: tuple[str, ...] = ("SHA1",),
) -> CollectionResult:
    collector = collector or FileCollector()
    return collector.collect(
        file_sets=file_sets or [FileSet(root_directory=project_root)],
        project_root=project_root,
        default_file_info=default_file_info or FileInfo(),
        path_overrides=path_overrides or {},
        owning_package_ref="SPDXRef-Package",
        relationship_type="GENERATES",
        checksum_algorithms=checksum_algorithms,
    )


def _build_project(root: Path) -> None:
    _write_file(root / "src" / "main.c", "int main(void) { return 0; }\n")
    _write_file(root / "src" / "App.java", "class App {}\n")
    _write_file(root / "docs" / "notes.txt", "notes\n")
    _write_file(root / "build" / "scratch.tmp", "scratch\n")


def test_col_001_collects_matching_files_sorted_by_name(tmp_path: Path) -> None:
    _build_project(tmp_path)

    result = _collect(
        tmp_path,
        file_sets=[FileSet(root_directory=tmp_path, exclude_patterns=("*.tmp",))],
    )

    assert [record.name for record in result.files] == [
        "./docs/notes.txt",
        "./src/App.java",
        "./src/main.c",
    ]
    main_c = result.files[2]
    assert main_c.sha1 == hashlib.sha1(b"int main(void) { return 0; }\n").hexdigest()
    assert main_c.file_type == "SOURCE"
    assert result.files[0].file_type == "TEXT"


def test_col_002_every_file_gets_one_relationship_to_the_package(tmp_path: Path) -> None:
    _build_project(tmp_path)

    result = _collect(tmp_path)

    for record in result.files:
        assert len(record.relationships) == 1
        relationship = record.relationships[0]
        assert relationship.element_id == record.spdx_id
        assert relationship.relationship_type == "GENERATES"
        assert relationship.related_element == "SPDXRef-Package"
    assert len({record.spdx_id for record in result.files}) == len(result.files)


def test_col_003_sha1_is_always_computed(tmp_path: Path) -> None:
    _write_file(tmp_path / "a.txt", "a")

    result = _collect(tmp_path, checksum_algorithms=("SHA256", "MD5"))

    assert [item.algorithm for item in result.files[0].checksums] == ["MD5", "SHA1", "SHA256"]


def test_col_004_file_without_tags_uses_configured_licenses(tmp_path: Path) -> None:
    _write_file(tmp_path / "a.txt", "plain text")

    result = _collect(
        tmp_path,
        default_file_info=FileInfo(declared_license="mit", copyright_text="Copyright Example"),
    )

    record = result.files[0]
    assert record.declared_license == MIT
    assert record.concluded_license == NO_ASSERTION
    assert record.license_info_from_files == frozenset({MIT})
    assert record.copyright_text == "Copyright Example"
    assert record.license_comment == ""


def test_col_005_two_tags_split_declared_and_concluded(tmp_path: Path) -> None:
    _write_file(tmp_path / "Licensed.java", FILE_WITH_ID_CONTENT)

    result = _collect(
        tmp_path, default_file_info=FileInfo(license_comment="Reviewed")
    )

    record = result.files[0]
    assert record.declared_license == MIT
    assert record.concluded_license == APACHE
    assert record.license_info_from_files == frozenset({MIT, APACHE})
    assert record.license_comment == (
        "Reviewed;  This file contains SPDX-License-Identifiers for MIT, Apache-2.0"
    )
    assert result.license_info_from_files == frozenset({MIT, APACHE})


def test_col_006_single_and_triple_tags_conclude_the_first(tmp_path: Path) -> None:
    _write_file(tmp_path / "one.c", "// SPDX-License-Identifier: (MIT OR Apache-2.0)\n")
    _write_file(
        tmp_path / "three.c",
        "// SPDX-License-Identifier: MIT\n// SPDX-License-Identifier: Apache-2.0\n"
        "// SPDX-License-Identifier: EUPL-1.2\n",
    )

    result = _collect(tmp_path)

    one, three = result.files
    assert one.declared_license == one.concluded_license == DisjunctiveSet(frozenset({MIT, APACHE}))
    assert three.declared_license == three.concluded_license == MIT
    assert len(three.license_info_from_files) == 3


def test_col_007_path_overrides_apply_by_nearest_match(tmp_path: Path) -> None:
    _build_project(tmp_path)

    result = _collect(
        tmp_path,
        default_file_info=FileInfo(comment="default"),
        path_overrides={
            "src": PathFileInfo(comment="sources", contributors=("Ada",)),
            "./src/main.c": PathFileInfo(comment="entry point"),
        },
    )

    comments = {record.name: record.comment for record in result.files}
    assert comments["./src/main.c"] == "entry point"
    assert comments["./src/App.java"] == "sources"
    assert comments["./docs/notes.txt"] == "default"
    app = next(record for record in result.files if record.name == "./src/App.java")
    assert app.contributors == ("Ada",)


def test_col_008_snippets_are_created_only_for_source_files(tmp_path: Path) -> None:
    _build_project(tmp_path)
    snippet = SnippetSpec(
        name="header",
        byte_range="1:20",
        line_range="1:1",
        concluded_license="MIT",
        license_info_in_snippet="Apache-2.0",
    )

    result = _collect(tmp_path, default_file_info=FileInfo(snippets=(snippet,)))

    assert sorted(item.file_name for item in result.snippets) == ["./src/App.java", "./src/main.c"]
    main_c = next(record for record in result.files if record.name == "./src/main.c")
    main_snippet = next(item for item in result.snippets if item.file_name == "./src/main.c")
    assert main_c.snippet_ids == (main_snippet.spdx_id,)
    assert main_snippet.byte_range == (1, 20)
    assert main_snippet.line_range == (1, 1)
    assert main_snippet.concluded_license == MIT
    assert main_snippet.license_info_in_snippet == frozenset({APACHE})
    notes = next(record for record in result.files if record.name == "./docs/notes.txt")
    assert notes.snippet_ids == ()


def test_col_009_output_prefix_sets_stable_names(tmp_path: Path) -> None:
    _write_file(tmp_path / "target" / "classes" / "App.class", "\xca\xfe")

    result = _collect(
        tmp_path,
        file_sets=[
            FileSet(
                root_directory=tmp_path / "target" / "classes",
                output_directory_prefix="lib\\classes/",
            )
        ],
    )

    assert [record.name for record in result.files] == ["./lib/classes/App.class"]
    assert result.files[0].file_type == "BINARY"


def test_col_010_duplicate_stable_names_raise(tmp_path: Path) -> None:
    _write_file(tmp_path / "one" / "a.txt", "1")
    _write_file(tmp_path / "two" / "a.txt", "2")
    collector = FileCollector()

    with pytest.raises(ConfigurationError):
        _collect(
            tmp_path,
            file_sets=[
                FileSet(root_directory=tmp_path / "one", output_directory_prefix="out"),
                FileSet(root_directory=tmp_path / "two", output_directory_prefix="out"),
            ],
            collector=collector,
        )

    assert collector.state == "failed"


def test_col_011_parse_error_aborts_with_chained_collection_error(tmp_path: Path) -> None:
    _write_file(tmp_path / "good.c", "// SPDX-License-Identifier: MIT\n")
    _write_file(tmp_path / "bad.c", "// SPDX-License-Identifier: (MIT OR\n")

    with pytest.raises(CollectionError) as exc_info:
        _collect(tmp_path)

    assert exc_info.value.file_name == "./bad.c"
    assert exc_info.value.operation == "parse"
    assert isinstance(exc_info.value.__cause__, ParseError)


def test_col_012_strict_registry_failure_is_a_license_error(tmp_path: Path) -> None:
    _write_file(tmp_path / "a.c", "// SPDX-License-Identifier: LicenseRef-unknown\n")
    collector = FileCollector(license_registry=LicenseRegistry(implicit_license_refs=False))

    with pytest.raises(CollectionError) as exc_info:
        _collect(tmp_path, collector=collector)

    assert exc_info.value.operation == "license"
    assert isinstance(exc_info.value.__cause__, UnknownLicenseRefError)


def test_col_013_invalid_default_license_is_a_configuration_error(tmp_path: Path) -> None:
    _write_file(tmp_path / "a.txt", "a")

    with pytest.raises(ConfigurationError):
        _collect(tmp_path, default_file_info=FileInfo(declared_license="MIT AND"))


def test_col_014_large_files_are_not_scanned(tmp_path: Path) -> None:
    _write_file(tmp_path / "big.c", "// SPDX-License-Identifier: MIT\n" + "x" * 64)

    result = _collect(tmp_path, collector=FileCollector(max_parse_bytes=16))

    assert result.files[0].declared_license == NO_ASSERTION


def test_col_015_collector_is_one_shot(tmp_path: Path) -> None:
    _write_file(tmp_path / "a.txt", "a")
    collector = FileCollector()
    _collect(tmp_path, collector=collector)

    assert collector.state == "done"
    with pytest.raises(RuntimeError):
        _collect(tmp_path, collector=collector)


def test_col_016_missing_root_and_empty_directories(tmp_path: Path) -> None:
    (tmp_path / "empty" / "nested").mkdir(parents=True)

    assert _collect(tmp_path).files == ()
    with pytest.raises(ConfigurationError):
        _collect(tmp_path, file_sets=[FileSet(root_directory=tmp_path / "missing")])


def test_col_017_verification_code_excludes_collected_manifest(tmp_path: Path) -> None:
    _write_file(tmp_path / "a.txt", "a")
    _write_file(tmp_path / "spdx.json", "{}")

    result = _collect(tmp_path)
    with_manifest = result.verification_code(manifest_name="spdx.json")
    without_manifest = result.verification_code()

    expected = hashlib.sha1(hashlib.sha1(b"a").hexdigest().encode("utf-8")).hexdigest()
    assert with_manifest.value == expected
    assert with_manifest.excluded_names == ("./spdx.json",)
    assert without_manifest.value != expected
    assert result.verification_code(manifest_name="other.json").value == without_manifest.value


def test_col_018_ids_are_reproducible_across_runs(tmp_path: Path) -> None:
    _build_project(tmp_path)

    first = _collect(tmp_path, collector=FileCollector(id_generator=IdGenerator()))
    second = _collect(tmp_path, collector=FileCollector(id_generator=IdGenerator()))

    assert [record.spdx_id for record in first.files] == [
        record.spdx_id for record in second.files
    ]


def test_col_019_collect_config_registers_extracted_licenses(tmp_path: Path) -> None:
    _write_file(tmp_path / "a.c", "// SPDX-License-Identifier: LicenseRef-house\n")
    config = CollectorConfig(
        project_root=tmp_path,
        file_sets=(FileSet(root_directory=tmp_path),),
        extracted_licenses=(ExtractedLicenseSpec("LicenseRef-house", "House rules"),),
        implicit_license_refs=False,
    )

    result, registry = collect_config(config)

    assert result.files[0].declared_license == SimpleLicenseRef("LicenseRef-house")
    info = registry.get("LicenseRef-house")
    assert info is not None
    assert info.extracted_text == "House rules"
    assert info.implicit is False


def test_col_020_collect_config_rejects_invalid_extracted_license_id(tmp_path: Path) -> None:
    config = CollectorConfig(
        project_root=tmp_path,
        file_sets=(FileSet(root_directory=tmp_path),),
        extracted_licenses=(ExtractedLicenseSpec("house", "House rules"),),
    )

    with pytest.raises(ConfigurationError):
        collect_config(config)


def test_col_021_verification_code_excludes_manifest_given_as_absolute_path(tmp_path: Path) -> None:
    _write_file(tmp_path / "a.txt", "a")
    _write_file(tmp_path / "spdx.json", "{}")
    outside = tmp_path.parent / "elsewhere" / "spdx.json"

    result = _collect(tmp_path)
    absolute = result.verification_code(manifest_name=str(tmp_path / "spdx.json"))

    assert absolute.excluded_names == ("./spdx.json",)
    assert absolute.value == result.verification_code(manifest_name="spdx.json").value
    assert result.verification_code(manifest_name=str(outside)).excluded_names == ()
