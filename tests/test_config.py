"""Tests for lull.config — LazyConfig and ManifestConfig."""

import pytest

from lull.config import LazyConfig, ManifestConfig
from lull.constants import Mode
from lull.errors import ConfigurationError
from lull.manifest.model import Manifest


class TestLazyConfig:
    def test_defaults(self) -> None:
        cfg = LazyConfig()

        assert cfg.mode is Mode.RENDER
        assert cfg.manifest == Manifest()
        assert cfg.preload_assets is True

    def test_override(self) -> None:
        manifest = Manifest(public_path="/", assets={"./a": ["a.js"]})
        cfg = LazyConfig(mode=Mode.HYDRATE, manifest=manifest, preload_assets=False)

        assert cfg.mode is Mode.HYDRATE
        assert cfg.manifest is manifest
        assert cfg.preload_assets is False

    def test_frozen(self) -> None:
        cfg = LazyConfig()

        with pytest.raises(AttributeError):
            cfg.mode = Mode.HYDRATE  # type: ignore[misc]

    def test_rejects_string_mode(self) -> None:
        with pytest.raises(ConfigurationError, match="mode"):
            LazyConfig(mode="hydrate")  # type: ignore[arg-type]

    def test_default_manifests_are_independent(self) -> None:
        assert LazyConfig().manifest is not LazyConfig().manifest


class TestManifestConfig:
    def test_defaults(self) -> None:
        cfg = ManifestConfig()
        assert cfg.filename == "lull-manifest.json"
        assert cfg.public_path is None

    def test_empty_filename_rejected(self) -> None:
        with pytest.raises(ConfigurationError):
            ManifestConfig(filename="")
