from .models import FsLayer, HistoryEntry, LayerBuildInfo, Manifest
from .client import fetch_manifest, fetch_tags
