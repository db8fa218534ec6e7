from .context import CmdContext, get_context, load_config

__all__ = ["CmdContext", "get_context", "load_config"]
