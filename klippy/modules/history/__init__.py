from .decoder import decode_history, decode_layers, format_command
