"""Runtime and build configuration.

Both configs are frozen dataclasses: immutable after creation,
IDE-autocompletable, no string-key dict lookups.
"""

from dataclasses import dataclass, field

from lull.constants import Mode
from lull.errors import ConfigurationError
from lull.manifest.model import Manifest


@dataclass(frozen=True, slots=True)
class LazyConfig:
    """Boot-time configuration, installed once with ``lull.runtime.init()``::

        init(LazyConfig(mode=Mode.HYDRATE, manifest=Manifest.load("lull-manifest.json")))
    """

    mode: Mode = Mode.RENDER
    manifest: Manifest = field(default_factory=Manifest)

    # Emit <link rel="preload"> hints for units the server does not render
    preload_assets: bool = True

    def __post_init__(self) -> None:
        if not isinstance(self.mode, Mode):
            msg = f"mode must be a Mode, got {self.mode!r}"
            raise ConfigurationError(msg)


@dataclass(frozen=True, slots=True)
class ManifestConfig:
    """Settings for the build-time manifest step."""

    filename: str = "lull-manifest.json"
    public_path: str | None = None  # None = use the compilation's public path

    def __post_init__(self) -> None:
        if not self.filename:
            msg = "manifest filename must not be empty"
            raise ConfigurationError(msg)
