# models.py
# Schema 1 manifest and the layer records embedded in its history

from dataclasses import dataclass, field
from typing import Optional


# =============================================================================
# Manifest (outer document)
# =============================================================================

@dataclass
class FsLayer:
    """One content-addressed layer blob listed in the manifest."""
    blob_sum: str


@dataclass
class HistoryEntry:
    """One history record; v1_compatibility is itself a JSON document."""
    v1_compatibility: str


@dataclass
class Manifest:
    """Image manifest as returned by /v2/<repo>/manifests/<tag>."""
    schema_version: int = 0
    name: str = ""
    tag: str = ""
    architecture: str = ""
    fs_layers: list[FsLayer] = field(default_factory=list)
    history: list[HistoryEntry] = field(default_factory=list)

    @property
    def layer_digests(self) -> list[str]:
        return [layer.blob_sum for layer in self.fs_layers]

    @classmethod
    def from_dict(cls, data: dict) -> "Manifest":
        """
        Build a Manifest from the decoded response body.

        History entries are kept as raw strings; decoding them is a separate
        step because their schema belongs to the image builder, not the
        manifest.

        Raises:
            TypeError, KeyError, AttributeError: If the body has the wrong shape
        """
        return cls(
            schema_version=data.get("schemaVersion", 0),
            name=data.get("name", ""),
            tag=data.get("tag", ""),
            architecture=data.get("architecture", ""),
            fs_layers=[FsLayer(blob_sum=layer["blobSum"]) for layer in data.get("fsLayers") or []],
            history=[
                HistoryEntry(v1_compatibility=entry["v1Compatibility"])
                for entry in data.get("history") or []
            ],
        )


# =============================================================================
# Layer build info (inner document)
# =============================================================================

@dataclass
class LayerBuildInfo:
    """Build details of one layer, decoded from a v1Compatibility string."""
    id: str = ""
    parent: Optional[str] = None
    created: str = ""
    docker_version: str = ""
    os: str = ""
    architecture: str = ""
    throwaway: bool = False
    cmd: list[str] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: dict) -> "LayerBuildInfo":
        container_config = data.get("container_config") or {}
        cmd = container_config.get("Cmd") or []
        if not isinstance(cmd, list) or not all(isinstance(token, str) for token in cmd):
            raise TypeError(f"Cmd must be a list of strings, got {cmd!r}")
        return cls(
            id=data.get("id", ""),
            parent=data.get("parent"),
            created=data.get("created", ""),
            docker_version=data.get("docker_version", ""),
            os=data.get("os", ""),
            architecture=data.get("architecture", ""),
            throwaway=bool(data.get("throwaway", False)),
            cmd=list(cmd),
        )
