"""
Pytest configuration and shared fixtures.
"""
import pytest
import tempfile
from pathlib import Path
from raidgrow.types import Configuration, Settings
from raidgrow.mdstat import TopologyReader


MDSTAT = """\
Personalities : [raid0] [raid1] [raid6] [raid5] [raid4] [raid10]
md1 : active raid1 sdf1[1] sde1[0]
      976630336 blocks super 1.2 [2/2] [UU]

md0 : active raid5 sdb1[0] sdc1[1]
      1953260544 blocks super 1.2 level 5, 64k chunk, algorithm 2 [2/2] [UU]

md10 : active raid10 sdh1[1] sdg1[0]
      1953260544 blocks super 1.2 64K chunks 2 near-copies [2/2] [UU]

unused devices: <none>
"""

DETAIL_RAID5 = """\
/dev/md0:
           Version : 1.2
        Raid Level : raid5
      Raid Devices : 2
             State : clean
            Layout : left-symmetric
        Chunk Size : 64K
"""

DETAIL_RAID10 = """\
/dev/md10:
        Raid Level : raid10
            Layout : near=2
        Chunk Size : 64K
"""


class FakeExecutor:
    """Stands in for util.run; records every call and fails selected commands."""

    def __init__(self, fail=None):
        # {argv prefix tuple: rc}
        self.fail = fail or {}
        self.calls = []
        self.dry_calls = []

    def __call__(self, cmd, capture=False, dry=False):
        argv = tuple(cmd)
        if dry:
            self.dry_calls.append(argv)
            return 0, ""
        self.calls.append(argv)
        for prefix, rc in self.fail.items():
            if argv[: len(prefix)] == prefix:
                return rc, f"{argv[0]}: failed"
        return 0, ""


def make_reader(mdstat=MDSTAT, chunk_bytes=65536, details=None):
    details = details if details is not None else {
        "/dev/md0": DETAIL_RAID5,
        "/dev/md10": DETAIL_RAID10,
    }
    return TopologyReader(
        read_live_status=lambda: mdstat,
        read_chunk_attribute=lambda dev: chunk_bytes,
        read_detail_report=lambda dev: details.get(dev, ""),
    )


@pytest.fixture
def fake_executor():
    return FakeExecutor()


@pytest.fixture
def reader():
    return make_reader()


@pytest.fixture
def create_config():
    return Configuration(
        mode="create",
        volume_group="vg0",
        array_device=None,
        partitions=("/dev/sdb1", "/dev/sdc1"),
        level=5,
        chunk_kb=64,
    )


@pytest.fixture
def extend_config():
    return Configuration(
        mode="extend",
        volume_group="vg0",
        array_device="/dev/md0",
        partitions=("/dev/sdd1",),
        level=1,
        chunk_kb=32,
    )


@pytest.fixture
def sample_settings():
    return Settings(
        level=5,
        chunk_kb=32,
        layout=None,
        run_summary_dir=Path("/tmp/raidgrow-test-logs"),
        write_summary=False,
        log_level="INFO",
    )


@pytest.fixture
def temp_config_file():
    """Create a temporary configuration file for testing."""
    toml_content = """
[defaults]
level = 10
chunk_kb = 128
layout = "far=2"

[output]
run_summary_dir = "/tmp/raidgrow-test-logs"
write_summary = false

[runtime]
log_level = "debug"
"""

    with tempfile.NamedTemporaryFile(mode='w', suffix='.toml', delete=False) as f:
        f.write(toml_content)
        f.flush()
        yield Path(f.name)

    Path(f.name).unlink(missing_ok=True)
