from dataclasses import dataclass


@dataclass(frozen=True)
class TargetDescriptor:
    build_id: str
    dist_id: str

    @property
    def platform(self):
        return self.dist_id.split("-")[0]

    @property
    def arch(self):
        return self.dist_id.split("-")[1]

    @property
    def libc(self):
        parts = self.dist_id.split("-")
        if len(parts) > 2:
            return parts[2]
        return None


# Upstream build directory -> distribution package suffix, in processing order.
TARGETS = (
    TargetDescriptor("darwin_arm64", "darwin-arm64"),
    TargetDescriptor("darwin_x64", "darwin-x64"),
    TargetDescriptor("freebsd_arm64", "freebsd-arm64"),
    TargetDescriptor("freebsd_ia32", "freebsd-ia32"),
    TargetDescriptor("freebsd_x64", "freebsd-x64"),
    TargetDescriptor("linux_arm64", "linux-arm64-glibc"),
    TargetDescriptor("linux_armhf", "linux-arm"),
    TargetDescriptor("linux_ia32", "linux-ia32"),
    TargetDescriptor("linux_loong64", "linux-loong64"),
    TargetDescriptor("linux_riscv64d", "linux-riscv64"),
    TargetDescriptor("linux_x64", "linux-x64-glibc"),
    TargetDescriptor("musl_arm64", "linux-arm64-musl"),
    TargetDescriptor("musl_x64", "linux-x64-musl"),
    TargetDescriptor("openbsd_ia32", "openbsd-ia32"),
    TargetDescriptor("openbsd_x64", "openbsd-x64"),
    TargetDescriptor("win32_arm64", "win32-arm64"),
    TargetDescriptor("win32_ia32", "win32-ia32"),
    TargetDescriptor("win32_x64", "win32-x64"),
)


def parse_matrix(entries):
    """Build a matrix from ``buildId=distId`` strings."""
    targets = []
    seen = set()
    for entry in entries:
        build_id, sep, dist_id = entry.partition("=")
        build_id = build_id.strip()
        dist_id = dist_id.strip()
        if not sep or not build_id or not dist_id:
            raise ValueError(f"expected BUILD_ID=DIST_ID, got '{entry}'")
        if len(dist_id.split("-")) not in (2, 3):
            raise ValueError(f"dist id {dist_id} must be platform-arch[-libc]")
        if build_id in seen:
            raise ValueError(f"duplicate build id {build_id}")
        seen.add(build_id)
        targets.append(TargetDescriptor(build_id, dist_id))
    return tuple(targets)
