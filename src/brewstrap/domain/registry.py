"""Text patches for podman's Homebrew service file and registries.conf.

Both files are plain text. Idempotency is a substring check, not a
structured TOML merge.
"""

from __future__ import annotations

# brew writes an escaped ``=`` into the systemd unit, which podman rejects.
BROKEN_TIME_FLAG = "--time\\=0"
FIXED_TIME_FLAG = "--time=0"

SERVICE_FILE_NAME = "homebrew.podman.service"
REGISTRIES_CONF = "etc/containers/registries.conf"

_MIRROR_TEMPLATE = """
[[registry]]
prefix = "{prefix}"
location = "{location}"
insecure = {insecure}
"""


def fix_service_unit(content: str) -> tuple[str, bool]:
    """Replace the first escaped ``--time\\=0`` flag.

    Returns ``(content, changed)``.
    """
    if BROKEN_TIME_FLAG not in content:
        return content, False
    return content.replace(BROKEN_TIME_FLAG, FIXED_TIME_FLAG, 1), True


def render_mirror_block(location: str, *, prefix: str = "docker.io", insecure: bool = True) -> str:
    """Render the ``[[registry]]`` block appended to registries.conf."""
    return _MIRROR_TEMPLATE.format(
        prefix=prefix,
        location=location,
        insecure="true" if insecure else "false",
    )


def has_mirror(content: str, location: str) -> bool:
    """True if *location* already appears anywhere in *content*."""
    return location in content
