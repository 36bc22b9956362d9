"""
Build command reconstruction from manifest history.

Every manifest history entry carries a JSON document encoded as a string
(v1Compatibility). Decoding happens in two stages: the embedded documents
are parsed into LayerBuildInfo records, then each record's Cmd tokens are
turned into a readable command line.
"""

import json
import logging

from klippy.config import NOP_MARKER
from klippy.error import HistoryDecodeError
from klippy.modules.formatters import GREEN, RED, WHITE, colorize
from klippy.modules.registry.models import LayerBuildInfo, Manifest

logger = logging.getLogger(__name__)

PLAIN_CONTINUATION = "\\\n&&"


# =============================================================================
# Stage 1: decode the embedded documents
# =============================================================================

def decode_layers(manifest: Manifest) -> list[LayerBuildInfo]:
    """
    Decode every history entry of the manifest, in manifest order.

    Raises:
        HistoryDecodeError: On the first entry that is not a JSON object;
                            no partial result is returned
    """
    layers = []
    for index, entry in enumerate(manifest.history):
        try:
            data = json.loads(entry.v1_compatibility)
            layer = LayerBuildInfo.from_dict(data)
        except (ValueError, TypeError, AttributeError) as e:
            raise HistoryDecodeError(index, e) from e
        layers.append(layer)
    return layers


# =============================================================================
# Stage 2: format commands
# =============================================================================

def format_command(layer: LayerBuildInfo, color: bool = False) -> str:
    """
    Rebuild the command that produced a layer.

    Cmd tokens are joined without a separator. Metadata-only instructions
    keep just the text after the last '#(nop) ' marker. Tabs are dropped and
    a line continuation is placed before every '&&'.

    Args:
        layer: Decoded layer record
        color: Add ANSI colours (green for commands, red for metadata
               instructions)
    """
    command = "".join(layer.cmd)

    nop = NOP_MARKER in command
    if nop:
        command = command.split(NOP_MARKER)[-1].strip()

    command = command.replace("\t", "")

    if not color:
        return command.replace("&&", PLAIN_CONTINUATION)

    code = RED if nop else GREEN
    return colorize(command.replace("&&", f"\\\n       {WHITE}&&{code}"), code)


def decode_history(manifest: Manifest, color: bool = False) -> list[str]:
    """
    Return one formatted build command per history entry.

    The order matches manifest.history (outermost layer first). Callers that
    want build order must reverse the list themselves.

    Raises:
        HistoryDecodeError: If any history entry is malformed
    """
    layers = decode_layers(manifest)
    logger.debug("Decoded [%d] history entries", len(layers))
    return [format_command(layer, color=color) for layer in layers]
