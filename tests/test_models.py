"""
Unit tests for core/models.py
Verifies SearchState construction, toggling, size filter and switch rendering,
plus configuration defaults and environment overrides.
"""
import os

import pytest

from dupelist.core.models import (
    SearchState, ListingConfig, ListingOption, FormattedEntry, EntryKind,
    normalize_directory, DEFAULT_PIPE_CLAUSE,
)


class TestSearchStateCreation:
    """Directories are validated and normalized when the state is built."""

    def test_directories_get_trailing_separator(self, search_dirs):
        dir_a, dir_b = search_dirs
        state = SearchState.create([str(dir_a), str(dir_b)])

        assert state.directories == [str(dir_a) + os.sep, str(dir_b) + os.sep]

    def test_relative_directory_becomes_absolute(self, search_dirs, monkeypatch):
        dir_a, _ = search_dirs
        monkeypatch.chdir(dir_a.parent)

        state = SearchState.create(["a"])

        assert os.path.isabs(state.directories[0])
        assert state.directories[0].endswith(os.sep)
        assert os.path.realpath(state.directories[0]) == os.path.realpath(dir_a)

    def test_order_is_preserved(self, search_dirs):
        dir_a, dir_b = search_dirs
        state = SearchState.create([str(dir_b), str(dir_a)])
        assert state.directories[0].startswith(str(dir_b))

    def test_file_path_rejects_whole_build(self, search_dirs, tmp_path):
        dir_a, _ = search_dirs
        not_a_dir = tmp_path / "file.txt"
        not_a_dir.write_text("x")

        with pytest.raises(NotADirectoryError):
            SearchState.create([str(dir_a), str(not_a_dir)])

    def test_missing_path_rejected(self, tmp_path):
        with pytest.raises(FileNotFoundError, match="Directory not found"):
            SearchState.create([str(tmp_path / "missing")])

    def test_empty_directory_list_rejected(self):
        with pytest.raises(ValueError):
            SearchState.create([])

    def test_duplicate_toggle_flags_collapsed(self, search_dirs):
        state = SearchState.create([str(search_dirs[0])], toggle_flags=["-r", "-n", "-r"])
        assert state.toggle_flags == ["-r", "-n"]

    def test_normalize_directory_keeps_single_separator(self, search_dirs):
        dir_a, _ = search_dirs
        assert normalize_directory(str(dir_a) + os.sep) == str(dir_a) + os.sep


class TestToggle:
    """Toggle is add-if-absent / remove-if-present."""

    def test_toggle_adds_missing_flag(self):
        state = SearchState(directories=["/tmp/"])
        state.toggle("-r")
        assert state.toggle_flags == ["-r"]

    def test_toggle_removes_present_flag(self):
        state = SearchState(directories=["/tmp/"], toggle_flags=["-r", "-n"])
        state.toggle("-r")
        assert state.toggle_flags == ["-n"]

    @pytest.mark.parametrize("flag", ["-r", "-n", "-H", "--recurse"])
    def test_double_toggle_restores_original_set(self, flag):
        state = SearchState(directories=["/tmp/"], toggle_flags=["-r", "-s"])
        before = set(state.toggle_flags)

        state.toggle(flag)
        state.toggle(flag)

        assert set(state.toggle_flags) == before
        assert len(state.toggle_flags) == len(before)

    def test_toggle_never_creates_duplicates(self):
        state = SearchState(directories=["/tmp/"])
        for _ in range(5):
            state.toggle("-r")
        assert state.toggle_flags.count("-r") == 1


class TestBuild:
    """Rendering of toggle flags and size filter."""

    def test_flag_and_size(self):
        state = SearchState(directories=["/tmp/"], toggle_flags=["-r"], size_filter="100")
        assert state.build() == "-r --size 100"

    def test_empty_state_renders_empty_string(self):
        state = SearchState(directories=["/tmp/"], toggle_flags=[], size_filter="")
        assert state.build() == ""

    def test_none_size_is_no_filter(self):
        state = SearchState(directories=["/tmp/"], toggle_flags=["-r"], size_filter=None)
        assert state.build() == "-r"

    def test_blank_size_is_no_filter(self):
        state = SearchState(directories=["/tmp/"], toggle_flags=["-r"], size_filter="   ")
        assert state.build() == "-r"

    def test_size_only(self):
        state = SearchState(directories=["/tmp/"], size_filter="1M")
        assert state.build() == "--size 1M"

    def test_duplicates_removed_defensively(self):
        state = SearchState(directories=["/tmp/"], toggle_flags=["-r", "-n", "-r"])
        assert state.build() == "-r -n"

    def test_build_is_repeatable(self):
        state = SearchState(directories=["/tmp/"], toggle_flags=["-r", "-n"], size_filter="10")
        assert state.build() == state.build()

    def test_has_flag(self):
        state = SearchState(directories=["/data/"], toggle_flags=["-r"])
        assert state.has_flag("-r")
        assert not state.has_flag("-n")

    def test_set_size_replaces_unconditionally(self):
        state = SearchState(directories=["/tmp/"], size_filter="100")
        state.set_size("")
        assert state.size_filter == ""
        assert state.build() == ""


class TestListingConfig:
    """Configuration defaults and environment overrides."""

    def test_defaults(self):
        config = ListingConfig()
        assert config.program in ("fdupes", "jdupes")
        assert config.listing_option.pipe_clause == DEFAULT_PIPE_CLAUSE
        assert config.default_toggle_flags == ["-r"]
        assert config.default_size_filter == ""
        assert config.verbose is False

    def test_long_listing_has_columns(self):
        assert ListingOption(switches="-ld").has_link_count_and_size_columns is True
        assert ListingOption(switches="-dilsb").has_link_count_and_size_columns is True

    def test_short_listing_has_no_columns(self):
        assert ListingOption(switches="-d").has_link_count_and_size_columns is False

    def test_escaping_switch_detected(self):
        assert ListingOption(switches="-dilsb").escapes_file_names is True
        assert ListingOption(switches="-ld").escapes_file_names is False

    def test_from_env_overrides(self):
        config = ListingConfig.from_env({
            "DUPELIST_PROGRAM": "jdupes",
            "DUPELIST_LS_SWITCHES": "-d",
            "DUPELIST_TOGGLES": "-r -n",
            "DUPELIST_SIZE": "500",
            "DUPELIST_VERBOSE": "yes",
        })

        assert config.program == "jdupes"
        assert config.listing_option.switches == "-d"
        assert config.listing_option.pipe_clause == DEFAULT_PIPE_CLAUSE
        assert config.default_toggle_flags == ["-r", "-n"]
        assert config.default_size_filter == "500"
        assert config.verbose is True

    def test_from_env_empty_toggles_clears_defaults(self):
        config = ListingConfig.from_env({"DUPELIST_TOGGLES": ""})
        assert config.default_toggle_flags == []

    def test_from_env_without_variables_uses_defaults(self):
        assert ListingConfig.from_env({}) == ListingConfig()


class TestFormattedEntry:
    def test_marker_range(self):
        entry = FormattedEntry(text="  a", start=4, end=7)
        assert entry.marker_range == (4, 7)
        assert entry.kind == EntryKind.FILE
