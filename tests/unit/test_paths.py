"""Tests for path conventions."""
from __future__ import annotations

import pytest
from hypothesis import given
from hypothesis import strategies as st

_segment = st.sampled_from(["src", "bin", "dist", "lib", "docs", "index.js", "utils.d.ts", "."])
_paths = st.builds(
    lambda prefix, segments: prefix + "/".join(segments),
    st.sampled_from(["", "./", "././"]),
    st.lists(_segment, min_size=1, max_size=5),
)
_values = st.recursive(
    _paths | st.integers() | st.booleans() | st.none(),
    lambda children: st.lists(children, max_size=3)
    | st.dictionaries(st.sampled_from(["types", "import", "require", "default"]), children, max_size=3),
    max_leaves=10,
)


class TestClassify:
    """Tests for PathConventions.classify."""

    @pytest.mark.parametrize(
        ("path", "category", "root", "relative"),
        [
            ("./src/index.js", "source", "src", "index.js"),
            ("src", "source", "src", ""),
            ("bin/cli.js", "source", "bin", "cli.js"),
            ("./dist/src/index.js", "build_output", "src", "index.js"),
            ("dist/dist/src/index.js", "build_output", "src", "index.js"),
            ("./dist/package.json", "build_output", None, "package.json"),
            ("dist/", "build_output", None, ""),
            ("README.md", "other", None, "README.md"),
            ("./package.json", "other", None, "package.json"),
            ("node scripts/setup.js", "other", None, "node scripts/setup.js"),
        ],
    )
    def test_categories(self, path: str, category: str, root: str | None, relative: str) -> None:
        """Paths are sorted into the three categories."""
        from libforge.manifest.paths import DEFAULT_CONVENTIONS

        classified = DEFAULT_CONVENTIONS.classify(path)

        assert classified.category.value == category
        assert classified.root == root
        assert classified.relative == relative

    def test_custom_directories(self) -> None:
        """Directory names come from the conventions."""
        from libforge.manifest.paths import PathCategory, PathConventions

        conventions = PathConventions(source_dir="lib", output_dir="out")

        assert conventions.classify("lib/a.js").category is PathCategory.SOURCE
        assert conventions.classify("out/lib/a.js").category is PathCategory.BUILD_OUTPUT
        assert conventions.classify("src/a.js").category is PathCategory.OTHER


class TestTransforms:
    """Tests for the path transforms."""

    def test_published_form(self) -> None:
        """Bare source paths get a ./ prefix; everything else is untouched."""
        from libforge.manifest.paths import to_published_form

        assert to_published_form("src/index.js") == "./src/index.js"
        assert to_published_form("src") == "./src"
        assert to_published_form("./src/index.js") == "./src/index.js"
        assert to_published_form("node src/setup.js") == "node src/setup.js"
        assert to_published_form(["src/", "README.md"]) == ["./src/", "README.md"]

    def test_executable_form(self) -> None:
        """npm bin paths have no ./ and no dist/ before src/."""
        from libforge.manifest.paths import to_executable_form

        assert to_executable_form("./src/cli.js") == "src/cli.js"
        assert to_executable_form("./dist/src/cli.js") == "src/cli.js"
        assert to_executable_form("dist/dist/bin/cli.js") == "bin/cli.js"
        assert to_executable_form({"tool": "./dist/bin/tool.js"}) == {"tool": "bin/tool.js"}
        assert to_executable_form("./scripts/run.js") == "./scripts/run.js"

    def test_distribution_form(self) -> None:
        """Build output references are re-rooted into the output directory."""
        from libforge.manifest.paths import to_distribution_form

        assert to_distribution_form("./dist/src/index.js") == "./src/index.js"
        assert to_distribution_form("./dist/package.json") == "./package.json"
        assert to_distribution_form("src/index.d.ts") == "./src/index.d.ts"
        assert to_distribution_form({"import": "./dist/src/a.js"}) == {"import": "./src/a.js"}

    def test_build_output_form(self) -> None:
        """Distribution references are rewritten relative to the project root."""
        from libforge.manifest.paths import to_build_output_form

        assert to_build_output_form("./src/index.js") == "./dist/src/index.js"
        assert to_build_output_form("./package.json") == "./dist/package.json"
        assert to_build_output_form("./dist/src/index.js") == "./dist/src/index.js"
        assert to_build_output_form("README.md") == "README.md"

    def test_non_strings_untouched(self) -> None:
        """Numbers, booleans and None pass through."""
        from libforge.manifest.paths import to_published_form

        assert to_published_form({"a": 1, "b": None, "c": [True]}) == {"a": 1, "b": None, "c": [True]}


class TestTransformProperties:
    """Property tests for the path transforms."""

    @given(value=_values)
    def test_published_form_idempotent(self, value: object) -> None:
        """to_published_form(to_published_form(x)) == to_published_form(x)."""
        from libforge.manifest.paths import to_published_form

        once = to_published_form(value)
        assert to_published_form(once) == once

    @given(value=_values)
    def test_executable_form_idempotent(self, value: object) -> None:
        """to_executable_form is idempotent."""
        from libforge.manifest.paths import to_executable_form

        once = to_executable_form(value)
        assert to_executable_form(once) == once

    @given(value=_values)
    def test_distribution_form_idempotent(self, value: object) -> None:
        """to_distribution_form is idempotent."""
        from libforge.manifest.paths import to_distribution_form

        once = to_distribution_form(value)
        assert to_distribution_form(once) == once

    @given(value=_values)
    def test_build_output_form_idempotent(self, value: object) -> None:
        """to_build_output_form is idempotent."""
        from libforge.manifest.paths import to_build_output_form

        once = to_build_output_form(value)
        assert to_build_output_form(once) == once
