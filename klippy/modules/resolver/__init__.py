from .resolver import ImageReference, host_resolves, resolve
