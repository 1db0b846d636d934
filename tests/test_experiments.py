import csv

import matplotlib
matplotlib.use("Agg")

import pytest

import experiments as exp


def test_generators_are_seeded():
	assert exp.gen_uniform(500, alphabet=16, seed=1) == exp.gen_uniform(500, alphabet=16, seed=1)
	assert exp.gen_zipf_like(500, seed=2) == exp.gen_zipf_like(500, seed=2)
	assert exp.gen_english_like(500, seed=3) == exp.gen_english_like(500, seed=3)


def test_generators_respect_size_and_alphabet():
	assert len(exp.gen_repetitive(1000, seed=4)) == 1000
	assert max(exp.gen_uniform(1000, alphabet=16, seed=5)) < 16
	assert max(exp.gen_zipf_like(1000, alphabet=32, seed=6)) < 32
	assert set(exp.gen_english_like(1000, seed=7)) <= set(exp.ENGLISH_CHARS.encode())


def test_generate_dataset_fallback():
	name, data = exp.generate_dataset("nope", 64, seed=0)
	assert name == "nope_fallback_uniform256"
	assert len(data) == 64
	name, _ = exp.generate_dataset("zipf32", 64, seed=0)
	assert name == "zipf32"


@pytest.mark.parametrize("pipeline", exp.PIPELINES)
def test_run_one(pipeline):
	data = exp.gen_english_like(4096, seed=11)
	row = exp.run_one(data, pipeline)
	assert row.correctness_ok == 1
	assert row.pipeline == pipeline
	assert row.file_size_bytes == 4096
	assert row.packed_bytes == (row.encoded_bits + row.pad_bits) // 8
	assert row.entropy_bits <= row.avg_code_length < row.entropy_bits + 1
	assert row.compression_ratio < 1.0


def test_run_one_single_symbol():
	row = exp.run_one(b"A" * 100, "packed")
	assert row.correctness_ok == 1
	assert row.unique_symbols == 1
	assert row.encoded_bits == 100


def test_run_one_rejects_unknown_pipeline():
	with pytest.raises(ValueError):
		exp.run_one(b"abc", "obst")


def test_write_csv_and_summary(tmp_path):
	rows = []
	for run_id in (1, 2):
		exp.record(rows, exp.gen_uniform(512, alphabet=8, seed=run_id), "exp1_distribution", "uniform8", run_id)
	exp.write_csv(tmp_path / "metrics.csv", rows)
	exp.group_summary(rows, tmp_path / "summary.csv")

	with (tmp_path / "metrics.csv").open(encoding="utf-8") as f:
		metrics = list(csv.DictReader(f))
	assert len(metrics) == 4

	with (tmp_path / "summary.csv").open(encoding="utf-8") as f:
		summary = list(csv.DictReader(f))
	assert [s["pipeline"] for s in summary] == ["bitstring", "packed"]
	assert all(s["n_runs"] == "2" for s in summary)
	assert all(float(s["correctness_ok_rate"]) == 1.0 for s in summary)


def test_power_of_two_range():
	assert exp.power_of_two_range(4, 32) == [4, 8, 16, 32]
	assert exp.power_of_two_range(0, 3) == [1, 2]


def test_main_small_run(tmp_path, capsys):
	outdir = tmp_path / "results"
	status = exp.main([
		"--outdir", str(outdir), "--runs", "1",
		"--exp1_size_kb", "1", "--exp1_generators", "uniform16,english_like",
		"--exp2_min_kb", "1", "--exp2_max_kb", "2", "--exp2_generators", "zipf32",
		"--exp3_size_kb", "1", "--exp3_max_alphabet", "8",
	])
	assert status == 0
	assert (outdir / "metrics.csv").exists()
	assert (outdir / "summary.csv").exists()
	assert (outdir / "exp1_code_length.png").exists()
	assert (outdir / "exp2_encode_ms_zipf32.png").exists()
	assert (outdir / "exp3_code_length.png").exists()
	assert "Correctness rate across all runs: 1.000" in capsys.readouterr().out
