"""Product assembler factory."""

from productsearch.assembly.assembler import ProductAssembler

_current_assembler: ProductAssembler | None = None


def get_assembler() -> ProductAssembler:
    """Return the assembler wired to the configured gateway and category service."""
    global _current_assembler
    if _current_assembler is None:
        from productsearch.category import get_category_service
        from productsearch.config import get_settings
        from productsearch.source import get_gateway

        _current_assembler = ProductAssembler(
            get_gateway(),
            get_category_service(),
            stage_timeout=get_settings().assembly_stage_timeout,
        )
    return _current_assembler


def set_assembler(assembler: ProductAssembler) -> None:
    global _current_assembler
    _current_assembler = assembler


def reset_assembler() -> None:
    global _current_assembler
    if _current_assembler is not None:
        _current_assembler.close()
    _current_assembler = None
