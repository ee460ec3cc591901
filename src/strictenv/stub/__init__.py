from .generator import DEFAULT_METADATA_NAME, DEFAULT_STUB_NAME, generate_stub, render_stub

__all__ = ["DEFAULT_METADATA_NAME", "DEFAULT_STUB_NAME", "generate_stub", "render_stub"]
