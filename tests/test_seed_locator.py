"""Tests for the seed locating pipeline"""

import io
import os

import pytest

from locator.errors import ConfigurationError, ResourceOpenError
from locator.models.locator import LocatorInput
from locator.models.occurrence import Occurrence
from locator.seed.seeder import SeedStrategy
from locator.seedLocator.seedLocator import PipelineState, SeedLocator
from locator.timer.progress import ProgressMonitor, ProgressSnapshot

EXPECTED_OVERLAPPING = "1\t0\n1\t4\n2\t2\n1\t1\n1\t5\n1\t2\n1\t6\n2\t0\n"


def run(index_file, sequence_file, output, **kwargs):
    monitor = ProgressMonitor()
    seedLocator = SeedLocator(monitor=monitor, output=io.StringIO())
    inputData = LocatorInput(
        sequenceFile=sequence_file,
        indexFile=index_file,
        outputLocation=output,
        seedLength=kwargs.pop("seedLength", 4),
        **kwargs,
    )
    return seedLocator, seedLocator.locateSeeds(inputData)


class TestPipeline:
    def test_overlapping_run(self, tmp_path, index_file, sequence_file):
        output = str(tmp_path / "out.tsv")
        seedLocator, result = run(index_file, sequence_file, output)

        assert seedLocator.state is PipelineState.DONE
        assert result.numberOfSequences == 3
        assert result.numberOfSeeds == 5
        assert result.numberOfMatchedSeeds == 4
        assert result.numberOfMatchedPaths == 8
        assert result.numberOfOccurrences == 8
        assert open(output).read() == EXPECTED_OVERLAPPING

    def test_progress_after_run(self, tmp_path, index_file, sequence_file):
        seedLocator, _ = run(index_file, sequence_file, str(tmp_path / "out.tsv"))
        # the unmatched TTTT seed is never sent to locate
        assert seedLocator.monitor.snapshot() == ProgressSnapshot(completed=4, total=5, occurrences=8)

    def test_shared_monitor_restarts_counters(self, tmp_path, index_file, sequence_file):
        monitor = ProgressMonitor()
        for name in ("first.tsv", "second.tsv"):
            SeedLocator(monitor=monitor, output=io.StringIO()).locateSeeds(LocatorInput(
                sequenceFile=sequence_file,
                indexFile=index_file,
                outputLocation=str(tmp_path / name),
                seedLength=4,
            ))
        assert monitor.snapshot() == ProgressSnapshot(completed=4, total=5, occurrences=8)

    def test_phase_timers_recorded(self, tmp_path, index_file, sequence_file):
        seedLocator, _ = run(index_file, sequence_file, str(tmp_path / "out.tsv"))
        timers = seedLocator.monitor.timers
        assert sorted(timers.names()) == ["find", "locate", "patterns", "sequences"]
        for name in timers.names():
            assert timers._timers[name].end is not None

    def test_non_overlapping_run(self, tmp_path, index_file, sequence_file):
        output = str(tmp_path / "out.tsv")
        _, result = run(index_file, sequence_file, output, strategy=SeedStrategy.NON_OVERLAPPING)
        assert result.numberOfSeeds == 3
        assert open(output).read() == "1\t0\n1\t4\n2\t2\n2\t0\n"

    def test_greedy_run(self, tmp_path, index_file, sequence_file):
        output = str(tmp_path / "out.tsv")
        _, result = run(index_file, sequence_file, output, strategy=SeedStrategy.GREEDY_NON_OVERLAPPING)
        assert result.numberOfSeeds == 4
        assert result.numberOfOccurrences == 6

    def test_distance_overrides_strategy(self, tmp_path, index_file, sequence_file):
        output = str(tmp_path / "out.tsv")
        _, result = run(index_file, sequence_file, output,
                        strategy=SeedStrategy.NON_OVERLAPPING, distance=2)
        assert result.numberOfSeeds == 4
        assert open(output).read() == "1\t0\n1\t4\n2\t2\n1\t2\n1\t6\n2\t0\n"

    def test_identical_runs_give_identical_output(self, tmp_path, index_file, sequence_file):
        first = str(tmp_path / "first.tsv")
        second = str(tmp_path / "second.tsv")
        run(index_file, sequence_file, first)
        run(index_file, sequence_file, second)
        assert open(first, "rb").read() == open(second, "rb").read()

    def test_status_lines(self, tmp_path, index_file, sequence_file):
        seedLocator, _ = run(index_file, sequence_file, str(tmp_path / "out.tsv"))
        lines = seedLocator.output.getvalue().splitlines()
        assert lines[0] == "Loading index..."
        assert any(line.startswith("Loaded 3 sequences in ") for line in lines)
        assert any(line.startswith("Generated 5 patterns in ") for line in lines)
        assert any(line.startswith("Found 4 patterns matching 8 paths in ") for line in lines)
        assert any(line.startswith("Located 8 occurrences in ") for line in lines)

    def test_memory_report(self, tmp_path, index_file, sequence_file):
        seedLocator, _ = run(index_file, sequence_file, str(tmp_path / "out.tsv"), trackMemory=True)
        text = seedLocator.output.getvalue()
        assert "Memory Usage After Loading Index" in text
        assert "Memory Usage After Locating" in text

    def test_sequence_stream(self, tmp_path, index_file):
        output = str(tmp_path / "out.tsv")
        _, result = run(index_file, io.BytesIO(b"GGACGT\r\n"), output)
        assert result.numberOfSeeds == 3
        assert open(output).read() == "2\t0\n2\t1\n1\t0\n1\t4\n2\t2\n"


class TestStubIndex:
    def test_every_seed_located_once(self, tmp_path, make_stub):
        stub, loader = make_stub(default=[Occurrence(9, 0)])
        path = tmp_path / "seqs.txt"
        path.write_text("ACGT\nGG\nTTTAA\n")
        output = tmp_path / "out.tsv"

        seedLocator = SeedLocator(indexType=loader, output=io.StringIO())
        seedLocator.locateSeeds(LocatorInput(
            sequenceFile=str(path),
            indexFile="stub.npz",
            outputLocation=str(output),
            seedLength=2,
        ))

        assert len(output.read_text().splitlines()) == 3 + 1 + 4
        assert stub.found == ["AC", "CG", "GT", "GG", "TT", "TT", "TA", "AA"]

    def test_empty_ranges_never_located(self, tmp_path, make_stub):
        stub, loader = make_stub(matches={"AC": [Occurrence(1, 5)], "GT": [Occurrence(2, 0), Occurrence(3, 1)]})
        path = tmp_path / "seqs.txt"
        path.write_text("ACGT\n")
        output = tmp_path / "out.tsv"

        seedLocator = SeedLocator(indexType=loader, output=io.StringIO())
        result = seedLocator.locateSeeds(LocatorInput(
            sequenceFile=str(path),
            indexFile="stub.npz",
            outputLocation=str(output),
            seedLength=2,
        ))

        assert len(stub.located) == 2
        assert all(not r.is_empty() for r in stub.located)
        assert result.numberOfMatchedPaths == 3
        assert output.read_text() == "1\t5\n2\t0\n3\t1\n"
        assert seedLocator.monitor.snapshot() == ProgressSnapshot(completed=2, total=3, occurrences=3)

    def test_no_matches_writes_empty_output(self, tmp_path, make_stub):
        _, loader = make_stub()
        path = tmp_path / "seqs.txt"
        path.write_text("ACGT\n")
        output = tmp_path / "out.tsv"

        seedLocator = SeedLocator(indexType=loader, output=io.StringIO())
        result = seedLocator.locateSeeds(LocatorInput(
            sequenceFile=str(path), indexFile="stub.npz", outputLocation=str(output), seedLength=2,
        ))

        assert seedLocator.state is PipelineState.DONE
        assert result.numberOfOccurrences == 0
        assert output.read_text() == ""


class TestFailures:
    def test_sequences_not_utf8(self, tmp_path, index_file):
        output = tmp_path / "out.tsv"
        seedLocator = SeedLocator(output=io.StringIO())
        with pytest.raises(ResourceOpenError):
            seedLocator.locateSeeds(LocatorInput(
                sequenceFile=io.BytesIO(b"\xff\n"),
                indexFile=index_file,
                outputLocation=str(output),
                seedLength=4,
            ))
        assert seedLocator.state is PipelineState.FAILED
        assert not output.exists()

    def test_missing_index(self, tmp_path, sequence_file):
        output = tmp_path / "out.tsv"
        seedLocator = SeedLocator(output=io.StringIO())
        with pytest.raises(ResourceOpenError):
            seedLocator.locateSeeds(LocatorInput(
                sequenceFile=sequence_file,
                indexFile=str(tmp_path / "missing.npz"),
                outputLocation=str(output),
                seedLength=4,
            ))
        assert seedLocator.state is PipelineState.FAILED
        assert not output.exists()

    def test_missing_sequences(self, tmp_path, index_file):
        output = tmp_path / "out.tsv"
        seedLocator = SeedLocator(output=io.StringIO())
        with pytest.raises(ResourceOpenError) as info:
            seedLocator.locateSeeds(LocatorInput(
                sequenceFile=str(tmp_path / "missing.txt"),
                indexFile=index_file,
                outputLocation=str(output),
                seedLength=4,
            ))
        assert "missing.txt" in str(info.value)
        assert seedLocator.state is PipelineState.FAILED
        assert not output.exists()

    def test_unwritable_output(self, tmp_path, index_file, sequence_file):
        output = str(tmp_path / "no" / "such" / "dir" / "out.tsv")
        seedLocator = SeedLocator(output=io.StringIO())
        with pytest.raises(ResourceOpenError):
            seedLocator.locateSeeds(LocatorInput(
                sequenceFile=sequence_file, indexFile=index_file, outputLocation=output, seedLength=4,
            ))
        assert seedLocator.state is PipelineState.FAILED
        assert not os.path.exists(output)

    @pytest.mark.parametrize("seedLength,distance", [(0, None), (-3, None), (4, 0)])
    def test_invalid_parameters(self, tmp_path, index_file, sequence_file, seedLength, distance):
        output = tmp_path / "out.tsv"
        seedLocator = SeedLocator(output=io.StringIO())
        with pytest.raises(ConfigurationError):
            seedLocator.locateSeeds(LocatorInput(
                sequenceFile=sequence_file, indexFile=index_file, outputLocation=str(output),
                seedLength=seedLength, distance=distance,
            ))
        assert seedLocator.state is PipelineState.FAILED
        assert not output.exists()

    def test_phases_run_in_order(self):
        seedLocator = SeedLocator(output=io.StringIO())
        with pytest.raises(RuntimeError):
            seedLocator.findSeeds()
        assert seedLocator.state is PipelineState.IDLE
