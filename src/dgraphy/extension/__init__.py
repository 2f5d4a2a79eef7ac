from .starlette_extension import StarletteDgraphExtension

__all__ = ("StarletteDgraphExtension",)
