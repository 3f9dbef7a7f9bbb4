from .generate import export_pdf, export_text, generate_pattern

__all__ = ["export_pdf", "export_text", "generate_pattern"]
