"""Tests for build_catalog CLI argument helpers."""

import pytest

from build_catalog.config import BuildConfig
from build_catalog.helpers import apply_overrides, parse_build_catalog_args


class TestParseArgs:
    def test_required_paths(self) -> None:
        args = parse_build_catalog_args(["--input", "posts", "--output", "site"])
        assert args.input == "posts"
        assert args.output == "site"
        assert args.page_size is None
        assert args.include_drafts is None
        assert args.log_level == "INFO"

    def test_missing_output(self) -> None:
        with pytest.raises(SystemExit):
            parse_build_catalog_args(["--input", "posts"])

    @pytest.mark.parametrize("value", ["0", "-1", "ten"])
    def test_rejects_bad_page_size(self, value: str) -> None:
        with pytest.raises(SystemExit):
            parse_build_catalog_args(["--input", "a", "--output", "b", "--page-size", value])


class TestApplyOverrides:
    def test_unset_flags_keep_config(self) -> None:
        config = BuildConfig(page_size=25, include_drafts=True, max_workers=8)
        args = parse_build_catalog_args(["--input", "posts", "--output", "site"])

        result = apply_overrides(config, args)

        assert result.input_dir == "posts"
        assert result.output_dir == "site"
        assert result.page_size == 25
        assert result.include_drafts is True
        assert result.max_workers == 8

    def test_flags_win(self) -> None:
        args = parse_build_catalog_args([
            "--input", "posts",
            "--output", "site",
            "--page-size", "5",
            "--include-drafts",
            "--separator", "^===$",
        ])

        result = apply_overrides(BuildConfig(), args)

        assert result.page_size == 5
        assert result.include_drafts is True
        assert result.separator_pattern == "^===$"

    def test_invalid_separator_rejected(self) -> None:
        args = parse_build_catalog_args(["--input", "a", "--output", "b", "--separator", "("])
        with pytest.raises(ValueError):
            apply_overrides(BuildConfig(), args)
