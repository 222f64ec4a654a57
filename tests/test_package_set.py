"""
Tests for PackageSet discovery and lookup.

Covers:
    - marker discovery with pathspecs and exclusions
    - root package synthesis
    - most-specific-first ownership resolution
    - exact fetch semantics
"""

from pathlib import Path

import pytest

from packguard.configuration import Configuration
from packguard.errors import DiscoveryError
from packguard.package import Package
from packguard.package_set import PackageSet, index_by_specificity
from conftest import write_file


@pytest.fixture
def package_set(configuration):
    return PackageSet.load_all_from(configuration)


class TestOwnership:

    def test_package_from_path_returns_package_for_known_path(self, package_set):
        assert package_set.package_from_path("components/timeline/something.rb").name == "components/timeline"

    def test_package_from_path_returns_root_for_unpackaged_path(self, package_set):
        assert package_set.package_from_path("components/unknown/something.rb").name == "."

    def test_package_from_path_returns_nested_packages(self, package_set):
        owner = package_set.package_from_path("components/timeline/nested/something.rb")
        assert owner.name == "components/timeline/nested"

    def test_package_from_path_matches_on_directory_boundary(self, package_set):
        """components/timeline must not own components/timeline_v2."""
        assert package_set.package_from_path("components/timeline_v2/x.rb").name == "."

    def test_package_from_path_accepts_path_objects(self, package_set):
        assert package_set.package_from_path(Path("components/sales/x.rb")).name == "components/sales"

    def test_longest_match_wins(self):
        package_set = PackageSet([
            Package(name="."),
            Package(name="a"),
            Package(name="a/b"),
            Package(name="a/b/c"),
        ])
        assert package_set.package_from_path("a/b/c/x").name == "a/b/c"
        assert package_set.package_from_path("a/b/x").name == "a/b"
        assert package_set.package_from_path("z/x").name == "."


class TestFetch:

    def test_fetch_returns_known_package(self, package_set):
        assert package_set.fetch("components/timeline").name == "components/timeline"
        assert "components/timeline" in package_set

    def test_fetch_returns_none_for_unknown_package(self, package_set):
        assert package_set.fetch("components/unknown") is None

    def test_fetch_never_falls_back_to_an_ancestor(self):
        package_set = PackageSet([Package(name="."), Package(name="a"), Package(name="a/b")])
        assert package_set.fetch("a/b/unknown") is None
        assert package_set.package_from_path("a/b/unknown").name == "a/b"


class TestRootPackage:

    def test_root_package_is_always_present(self, tmp_path):
        configuration = Configuration(root_path=tmp_path)
        package_set = PackageSet.load_all_from(configuration)
        assert len(package_set) == 1
        assert package_set.fetch(".") is not None
        assert package_set.root_package.enforce_dependency is False
        assert package_set.root_package.enforce_privacy is False
        assert package_set.root_package.dependencies == frozenset()

    def test_discovered_root_package_is_not_duplicated(self, tmp_path):
        write_file(tmp_path, "package.yml", "enforce_dependencies: true\n")
        package_set = PackageSet.load_all_from(Configuration(root_path=tmp_path))
        assert [p.name for p in package_set] == ["."]
        assert package_set.root_package.enforce_dependency is True

    def test_root_is_ordered_last(self, package_set):
        names = [p.name for p in package_set]
        assert names[-1] == "."
        assert names.index("components/timeline/nested") < names.index("components/timeline")


class TestConstruction:

    def test_duplicate_names_are_rejected(self):
        with pytest.raises(DiscoveryError, match="components/sales"):
            PackageSet([Package(name="."), Package(name="components/sales"), Package(name="components/sales")])

    def test_index_orders_by_name_length(self):
        index = index_by_specificity([Package(name="."), Package(name="a/b/c"), Package(name="a")])
        assert list(index) == ["a/b/c", "a", "."]

    def test_root_goes_last_behind_one_character_names(self):
        index = index_by_specificity([Package(name="."), Package(name="z")])
        assert list(index) == ["z", "."]

    def test_discovered_one_character_package_owns_its_files(self, tmp_path):
        write_file(tmp_path, "package.yml", "")
        write_file(tmp_path, "z/package.yml", "enforce_dependencies: true\n")

        package_set = PackageSet.load_all_from(Configuration(root_path=tmp_path, exclude=[]))

        assert [p.name for p in package_set] == ["z", "."]
        assert package_set.package_from_path("z/app/models/x.rb").name == "z"
        assert package_set.package_from_path("app/models/x.rb").name == "."

    def test_marker_contents_become_policy(self, package_set):
        timeline = package_set.fetch("components/timeline")
        assert timeline.enforce_dependency is True
        assert timeline.dependencies == frozenset({"components/sales"})
        core = package_set.fetch("components/core")
        assert core.enforce_privacy is True
        assert core.public_path == "app/public"

    def test_malformed_marker_is_a_discovery_error(self, tmp_path):
        write_file(tmp_path, "broken/package.yml", "dependencies: [unclosed\n")
        with pytest.raises(DiscoveryError):
            PackageSet.load_all_from(Configuration(root_path=tmp_path))

    def test_wrongly_typed_marker_field_is_a_discovery_error(self, tmp_path):
        write_file(tmp_path, "broken/package.yml", "enforce_privacy: sometimes\n")
        with pytest.raises(DiscoveryError, match="broken"):
            PackageSet.load_all_from(Configuration(root_path=tmp_path))


class TestPackagePaths:

    def test_supports_a_path_wildcard(self, configuration, app_dir):
        paths = PackageSet.package_paths(configuration, "**")
        assert app_dir / "components/sales/package.yml" in paths
        assert app_dir / "package.yml" in paths

    def test_supports_a_single_path_as_a_string(self, configuration, app_dir):
        paths = PackageSet.package_paths(configuration, "components/sales")
        assert paths == [app_dir / "components/sales/package.yml"]

    def test_supports_many_paths_as_a_list(self, configuration, app_dir):
        paths = PackageSet.package_paths(configuration, ["components/sales", "."])
        assert paths == [
            app_dir / "components/sales/package.yml",
            app_dir / "package.yml",
        ]

    def test_excludes_paths_inside_the_vendor_directory(self, app_dir):
        vendor_package = app_dir / "vendor/cache/gems/example/package.yml"

        configuration = Configuration(root_path=app_dir, exclude=[])
        assert vendor_package in PackageSet.package_paths(configuration, "**")

        configuration = Configuration(root_path=app_dir, exclude=[], vendor_path="vendor/cache/gems")
        assert vendor_package not in PackageSet.package_paths(configuration, "**")

    def test_vendor_exclusion_follows_symlinks(self, app_dir):
        linked = app_dir / "components/linked_gem"
        linked.symlink_to(app_dir / "vendor/cache/gems/example")
        configuration = Configuration(root_path=app_dir, exclude=[], vendor_path="vendor/cache/gems")

        paths = PackageSet.package_paths(configuration, "components/*")
        assert linked / "package.yml" not in paths
        assert app_dir / "components/sales/package.yml" in paths

    def test_exclude_globs_remove_markers(self, app_dir):
        configuration = Configuration(root_path=app_dir, exclude=["vendor/**"])
        package_set = PackageSet.load_all_from(configuration)
        assert package_set.fetch("vendor/cache/gems/example") is None
        assert package_set.fetch("components/sales") is not None

    def test_exclude_globs_support_brace_alternation(self, app_dir):
        configuration = Configuration(root_path=app_dir, exclude=["components/{sales,core}/*"])
        package_set = PackageSet.load_all_from(configuration)
        assert package_set.fetch("components/sales") is None
        assert package_set.fetch("components/core") is None
        assert package_set.fetch("components/timeline") is not None

    def test_default_exclude_drops_vendored_markers(self, app_dir):
        package_set = PackageSet.load_all_from(Configuration(root_path=app_dir))
        assert package_set.fetch("vendor/cache/gems/example") is None

    def test_pathspec_dot_segments_are_collapsed(self, configuration, app_dir):
        paths = PackageSet.package_paths(configuration, "components/../components/sales")
        assert paths == [app_dir / "components/sales/package.yml"]

    def test_root_with_glob_characters_in_its_name(self, tmp_path):
        root = tmp_path / "proj[1]"
        write_file(root, "components/sales/package.yml", "")
        write_file(root, "components/core/package.yml", "")

        package_set = PackageSet.load_all_from(Configuration(root_path=root, exclude=["components/core/*"]))

        assert package_set.fetch("components/sales") is not None
        assert package_set.fetch("components/core") is None
