import json

import pytest
from typer.testing import CliRunner

from benchmarks.traversal_ops import app, benchmark_churn, benchmark_nested
from safelist import config as sl_config


@pytest.fixture(autouse=True)
def _default_runtime(monkeypatch: pytest.MonkeyPatch):
    monkeypatch.delenv("SAFELIST_ENABLE_NUMBA", raising=False)
    sl_config.reset_runtime_config_cache()
    yield
    sl_config.reset_runtime_config_cache()


def test_churn_without_mutations_visits_everything():
    result = benchmark_churn(size=50, mutation_rate=0.0, seed=0)
    assert result.mode == "churn"
    assert result.elements_visited == 50
    assert result.mutations == 0
    assert result.final_size == 50
    assert result.registry_slots == 1


def test_churn_with_mutations_is_deterministic():
    first = benchmark_churn(size=200, mutation_rate=0.5, seed=3)
    second = benchmark_churn(size=200, mutation_rate=0.5, seed=3)
    assert first.mutations > 0
    assert (first.elements_visited, first.final_size) == (second.elements_visited, second.final_size)


def test_nested_counts_inner_passes():
    result = benchmark_nested(size=20, every=5, seed=0)
    assert result.elements_visited == 20 + 4 * 20
    assert result.registry_slots == 2


def test_nested_rejects_zero_interval():
    with pytest.raises(ValueError):
        benchmark_nested(size=5, every=0, seed=0)


def test_cli_emits_json():
    runner = CliRunner()
    result = runner.invoke(app, ["churn", "--size", "30", "--seed", "1"])
    assert result.exit_code == 0, result.output
    payload = json.loads(result.output)
    assert payload["mode"] == "churn"
    assert payload["initial_size"] == 30
    assert payload["runtime"]["enable_numba"] is False


def test_cli_writes_output_file(tmp_path):
    target = tmp_path / "nested.json"
    runner = CliRunner()
    result = runner.invoke(app, ["nested", "--size", "10", "--every", "2", "-o", str(target)])
    assert result.exit_code == 0, result.output
    payload = json.loads(target.read_text(encoding="utf-8"))
    assert payload["elements_visited"] == 10 + 5 * 10
