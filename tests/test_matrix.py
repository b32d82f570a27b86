import pytest

from cream_release.matrix import TARGETS, TargetDescriptor, parse_matrix


def test_descriptor_components():
    target = TargetDescriptor("musl_arm64", "linux-arm64-musl")
    assert (target.platform, target.arch, target.libc) == ("linux", "arm64", "musl")
    assert TargetDescriptor("win32_ia32", "win32-ia32").libc is None


def test_builtin_matrix_is_consistent():
    build_ids = [target.build_id for target in TARGETS]
    dist_ids = [target.dist_id for target in TARGETS]
    assert len(set(build_ids)) == len(build_ids)
    assert len(set(dist_ids)) == len(dist_ids)
    for target in TARGETS:
        assert target.libc in (None, "glibc", "musl")
        if target.build_id.startswith("musl_"):
            assert target.libc == "musl"


def test_parse_matrix_keeps_order():
    targets = parse_matrix(["win32_x64=win32-x64", "linux_x64 = linux-x64-glibc"])
    assert targets == (
        TargetDescriptor("win32_x64", "win32-x64"),
        TargetDescriptor("linux_x64", "linux-x64-glibc"),
    )


@pytest.mark.parametrize(
    "entries",
    [
        ["linux_x64"],
        ["linux_x64=linux"],
        ["linux_x64=linux-x64-glibc-extra"],
        ["linux_x64=linux-x64", "linux_x64=linux-x64-glibc"],
    ],
)
def test_parse_matrix_rejects(entries):
    with pytest.raises(ValueError):
        parse_matrix(entries)
