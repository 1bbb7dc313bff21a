from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field


class ImageReference(BaseModel):
    """Normalized registry coordinates of an image"""
    model_config = ConfigDict(frozen=True)

    registry_host: str
    image_name: str
    tag: str = "latest"

    def __str__(self):
        return f"{self.registry_host}/{self.image_name}:{self.tag}"


class Platform(BaseModel):
    """Target platform selected from multi-platform manifest indexes"""
    model_config = ConfigDict(frozen=True)

    architecture: str = "amd64"
    os: str = "linux"


class IndexPlatform(BaseModel):
    """Platform object of a manifest index entry; absent fields never match"""
    architecture: str = ""
    os: str = ""


class ManifestLayer(BaseModel):
    """Image manifest layer descriptor"""
    mediaType: str = ""
    digest: str
    size: int


class Manifest(BaseModel):
    """Single-platform image manifest"""
    model_config = ConfigDict(frozen=True)

    schemaVersion: int = 2
    mediaType: str = ""
    layers: List[ManifestLayer]


class ManifestIndexEntry(BaseModel):
    """Per-platform entry of a manifest index"""
    mediaType: str = ""
    digest: str
    platform: Optional[IndexPlatform] = None


class ManifestIndex(BaseModel):
    """Multi-platform manifest index (manifest of manifests)"""
    schemaVersion: int = 2
    mediaType: str = ""
    manifests: List[ManifestIndexEntry] = Field(default_factory=list)


class LayerInfo(BaseModel):
    """Distinct layer count and total download size of an image"""
    layers_count: int = Field(ge=0)
    total_size: int = Field(ge=0)


class OSReleaseRecord(BaseModel):
    """OS identity parsed from an os-release file"""
    pretty_name: str = ""
    name: str = ""
    version_id: str = ""
    id: str = Field(min_length=1)
    home_url: str = ""


class ImageRequest(BaseModel):
    """Inbound request body shared by both API endpoints"""
    repository: str
    name: str
    tag: str = "latest"
