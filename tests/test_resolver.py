"""Tests for the version resolver."""

from datetime import UTC, datetime

import pytest

from buildversion.errors import BuildNumberError, RevisionError, VersionFormatError
from buildversion.merger import merge_command_line
from buildversion.params import BuildParams
from buildversion.resolver import (
    BuildVersion,
    compose_long_version,
    increment_build_number,
    split_version,
)


def make_params(*tokens: str) -> BuildParams:
    return merge_command_line(BuildParams(), list(tokens))


class TestVersionHelpers:
    def test_split_version(self):
        assert split_version("1.2.3") == ["1", "2", "3"]

    @pytest.mark.parametrize("version", ["", "1", "1.2", "1.2.3.4"])
    def test_split_version_rejects(self, version):
        with pytest.raises(VersionFormatError) as exc_info:
            split_version(version)
        assert exc_info.value.version == version

    def test_increment(self):
        assert increment_build_number("1.2.3") == "1.2.4"
        assert increment_build_number("1.2.99") == "1.2.100"

    def test_increment_non_numeric(self):
        with pytest.raises(BuildNumberError) as exc_info:
            increment_build_number("1.2.x")
        assert isinstance(exc_info.value.cause, ValueError)
        assert isinstance(exc_info.value, VersionFormatError)

    def test_compose_long_version(self):
        assert compose_long_version("1.2.3", "20261017", "abcdef0123456789") == "1.2.3-20261017-abcdef01"


class TestPrintMode:
    def test_prints_long_version(self, git_dir, fixed_clock, capsys):
        params = make_params("-v", "1.2.3", "--print", "--GitDir", str(git_dir))
        info = BuildVersion(params, clock=fixed_clock).run()
        assert capsys.readouterr().out == "1.2.3-20261017-abcdef01\n"
        assert info.printed is True
        assert info.artifacts == []

    def test_prints_with_today(self, git_dir, capsys):
        params = make_params("-v", "1.2.3", "--print", "--GitDir", str(git_dir))
        BuildVersion(params).run()
        today = datetime.now(UTC).strftime("%Y%m%d")
        assert capsys.readouterr().out == f"1.2.3-{today}-abcdef01\n"

    def test_increment_then_print(self, git_dir, fixed_clock, capsys):
        params = make_params("-v", "1.2.3", "-ib", "-p", "--GitDir", str(git_dir))
        info = BuildVersion(params, clock=fixed_clock).run()
        assert params.version == "1.2.4"
        assert info.version == "1.2.4"
        assert capsys.readouterr().out == "1.2.4-20261017-abcdef01\n"

    def test_explicit_long_version_and_date(self, git_dir, fixed_clock, capsys):
        params = make_params(
            "-v", "1.2.3", "-p", "--GitDir", str(git_dir),
            "--BuildDate", "19991231", "--LongVersion", "custom",
        )
        info = BuildVersion(params, clock=fixed_clock).run()
        assert info.build_date == "19991231"
        assert capsys.readouterr().out == "custom\n"

    def test_explicit_date_used_in_long_version(self, git_dir, fixed_clock):
        params = make_params("-v", "1.2.3", "-p", "--GitDir", str(git_dir), "--BuildDate", "19991231")
        info = BuildVersion(params, clock=fixed_clock).run()
        assert info.long_version == "1.2.3-19991231-abcdef01"

    def test_injected_revision_source(self, fixed_clock, capsys):
        params = make_params("-v", "3.0.0", "-p")
        seen = []

        def source(git_dir):
            seen.append(git_dir)
            return "0123456789abcdef"

        BuildVersion(params, clock=fixed_clock, revision_source=source).run()
        assert seen == ["./.git"]
        assert capsys.readouterr().out == "3.0.0-20261017-01234567\n"


class TestArtifactMode:
    def test_writes_all_artifacts(self, tmp_path, git_dir, fixed_clock, capsys):
        assembly = tmp_path / "AssemblyInfo.cs"
        assembly.write_text('[assembly: AssemblyVersion("0.0.0.0")]\n', encoding="utf-8")
        params = make_params(
            "-v", "1.2.3", "--GitDir", str(git_dir), "-ns", "My.App",
            "-f", str(tmp_path / "VersionInfo.cs"),
            "-a", str(assembly),
            "--WriteAppVersion", str(tmp_path / "version.txt"),
        )
        info = BuildVersion(params, clock=fixed_clock).run()

        assert [a.name for a in info.artifacts] == ["version_file", "assembly_info", "app_version"]
        assert all(a.written for a in info.artifacts)
        assert capsys.readouterr().out == ""
        stub = (tmp_path / "VersionInfo.cs").read_text(encoding="utf-8")
        assert "namespace My.App {" in stub
        assert 'longVersion = "1.2.3-20261017-abcdef01"' in stub
        assert 'AssemblyVersion("1.2.3.0")' in assembly.read_text(encoding="utf-8")
        assert (tmp_path / "version.txt").read_text(encoding="utf-8") == "1.2.3"

    def test_only_version_file_by_default(self, tmp_path, git_dir, fixed_clock):
        params = make_params("-v", "1.2.3", "--GitDir", str(git_dir), "-f", str(tmp_path / "V.py"))
        info = BuildVersion(params, clock=fixed_clock).run()
        assert [a.name for a in info.artifacts] == ["version_file"]

    def test_failed_artifact_does_not_stop_siblings(self, tmp_path, git_dir, fixed_clock):
        params = make_params(
            "-v", "1.2.3", "--GitDir", str(git_dir),
            "-f", str(tmp_path / "missing" / "VersionInfo.cs"),
            "--WriteAppVersion", str(tmp_path / "version.txt"),
        )
        info = BuildVersion(params, clock=fixed_clock).run()
        assert len(info.failed_artifacts) == 1
        assert info.failed_artifacts[0].name == "version_file"
        assert (tmp_path / "version.txt").read_text(encoding="utf-8") == "1.2.3"

    def test_non_utf8_assembly_does_not_stop_siblings(self, tmp_path, git_dir, fixed_clock):
        assembly = tmp_path / "AssemblyInfo.cs"
        assembly.write_text('[assembly: AssemblyVersion("0.0.0.0")]\n', encoding="utf-16")
        params = make_params(
            "-v", "1.2.3", "--GitDir", str(git_dir),
            "-f", str(tmp_path / "VersionInfo.cs"),
            "-a", str(assembly),
            "--WriteAppVersion", str(tmp_path / "version.txt"),
        )
        info = BuildVersion(params, clock=fixed_clock).run()
        assert [a.name for a in info.failed_artifacts] == ["assembly_info"]
        assert (tmp_path / "VersionInfo.cs").exists()
        assert (tmp_path / "version.txt").read_text(encoding="utf-8") == "1.2.3"

    def test_params_updated_with_resolved_values(self, tmp_path, git_dir, fixed_clock):
        params = make_params("-v", "1.2.3", "--GitDir", str(git_dir), "-f", str(tmp_path / "V.cs"))
        BuildVersion(params, clock=fixed_clock).run()
        assert params.build_date == "20261017"
        assert params.long_version == "1.2.3-20261017-abcdef01"


class TestFatalErrors:
    """Fatal errors happen before any artifact is touched."""

    def _outputs(self, tmp_path):
        assembly = tmp_path / "AssemblyInfo.cs"
        assembly.write_text('[assembly: AssemblyVersion("0.0.0.0")]\n', encoding="utf-8")
        return [
            "-f", str(tmp_path / "VersionInfo.cs"),
            "-a", str(assembly),
            "--WriteAppVersion", str(tmp_path / "version.txt"),
        ]

    def _assert_untouched(self, tmp_path):
        assert not (tmp_path / "VersionInfo.cs").exists()
        assert not (tmp_path / "version.txt").exists()
        assembly = (tmp_path / "AssemblyInfo.cs").read_text(encoding="utf-8")
        assert 'AssemblyVersion("0.0.0.0")' in assembly

    def test_bad_version_format(self, tmp_path, git_dir):
        params = make_params("-v", "1.2", "--GitDir", str(git_dir), *self._outputs(tmp_path))
        with pytest.raises(VersionFormatError):
            BuildVersion(params).run()
        self._assert_untouched(tmp_path)

    def test_missing_version(self, tmp_path, git_dir):
        params = make_params("--GitDir", str(git_dir), *self._outputs(tmp_path))
        with pytest.raises(VersionFormatError):
            BuildVersion(params).run()
        self._assert_untouched(tmp_path)

    def test_non_numeric_build(self, tmp_path, git_dir):
        params = make_params("-v", "1.2.x", "-ib", "--GitDir", str(git_dir), *self._outputs(tmp_path))
        with pytest.raises(BuildNumberError):
            BuildVersion(params).run()
        self._assert_untouched(tmp_path)

    def test_missing_git_head(self, tmp_path):
        params = make_params("-v", "1.2.3", "--GitDir", str(tmp_path / "no-git"), *self._outputs(tmp_path))
        with pytest.raises(RevisionError) as exc_info:
            BuildVersion(params).run()
        assert exc_info.value.context.path == str(tmp_path / "no-git")
        self._assert_untouched(tmp_path)

    def test_empty_git_dir(self, tmp_path):
        params = make_params("-v", "1.2.3", *self._outputs(tmp_path))
        params.git_dir = ""
        with pytest.raises(RevisionError, match="gitDir not specified"):
            BuildVersion(params).run()
        self._assert_untouched(tmp_path)

    def test_missing_git_in_print_mode_prints_nothing(self, tmp_path, capsys):
        params = make_params("-v", "1.2.3", "-p", "--GitDir", str(tmp_path / "no-git"))
        with pytest.raises(RevisionError):
            BuildVersion(params).run()
        assert capsys.readouterr().out == ""
