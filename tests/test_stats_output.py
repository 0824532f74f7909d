import pytest

from ExperimentConfig import ExperimentConfig
from StatsOutput import (
    OutputDirectoryError,
    list_stats_files,
    prepare_run_dir,
    run_folder_name,
    stats_file_name,
    stats_prefix,
)


def make_config(first=1.0, rest=0.14, payload=200):
    return ExperimentConfig(enable_cts_rts=False, node_count=6, duration=203,
                            first_node_load=first, rest_node_load=rest, payload_length=payload)


def test_run_folder_name_encodes_triple():
    assert run_folder_name(make_config()) == "u_0=1.00rho=0.14T=200"
    assert run_folder_name(make_config(first=0.5, rest=0.3, payload=1500)) == "u_0=0.50rho=0.30T=1500"


def test_small_and_large_payload_runs_get_distinct_directories():
    assert run_folder_name(make_config(payload=200)) != run_folder_name(make_config(payload=1500))


def test_prepare_run_dir_creates_nested_directories(tmp_path):
    root = tmp_path / "sweep" / "out"
    run_dir = prepare_run_dir(make_config(), root)
    assert run_dir == root / "u_0=1.00rho=0.14T=200"
    assert run_dir.is_dir()
    # reusing an existing directory is fine
    assert prepare_run_dir(make_config(), root) == run_dir


def test_prepare_run_dir_fails_when_root_is_a_file(tmp_path):
    blocker = tmp_path / "blocker"
    blocker.write_text("not a directory")
    with pytest.raises(OutputDirectoryError, match="Cannot create statistics directory"):
        prepare_run_dir(make_config(), blocker)


def test_output_directory_error_is_an_os_error():
    assert issubclass(OutputDirectoryError, OSError)


def test_stats_prefix_and_file_names(tmp_path):
    assert stats_prefix(tmp_path) == str(tmp_path / "nodes")
    assert stats_file_name(3) == "nodes_003_000"


def test_list_stats_files_ignores_other_files(tmp_path):
    for node in (2, 0, 1):
        (tmp_path / stats_file_name(node)).write_text("")
    (tmp_path / "summary.txt").write_text("")
    (tmp_path / "nodes_dir").mkdir()
    assert [p.name for p in list_stats_files(tmp_path)] == ["nodes_000_000", "nodes_001_000", "nodes_002_000"]
